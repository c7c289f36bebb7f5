"""
Public Input Unit Tests
Tests for trustledger/transition/public_inputs.py
"""
import pytest

from trustledger.crypto.field_codec import PUBLIC_INPUT_BITS, field_to_bytes32
from trustledger.crypto.hashing import sha256
from trustledger.schemas.errors import DigestMismatchException, IndexOutOfRangeException
from trustledger.transition.public_inputs import (
    PREIMAGE_SIZE,
    bind_public_input,
    public_input_preimage,
    verify_public_input,
)

STORAGE_HASH = sha256(b"records")
ARGS = (123, 456, 7, 8, 9, STORAGE_HASH)


class TestPreimage:
    """Tests for the 112-byte preimage layout."""

    def test_layout(self):
        preimage = public_input_preimage(*ARGS)
        assert len(preimage) == PREIMAGE_SIZE
        assert preimage[0:32] == field_to_bytes32(123)
        assert preimage[32:64] == field_to_bytes32(456)
        assert preimage[64:72] == (7).to_bytes(8, "big")
        assert preimage[72:76] == (8).to_bytes(4, "big")
        assert preimage[76:80] == (9).to_bytes(4, "big")
        assert preimage[80:112] == STORAGE_HASH

    def test_bad_storage_hash(self):
        with pytest.raises(IndexOutOfRangeException):
            public_input_preimage(1, 2, 3, 4, 5, b"\x00" * 31)

    def test_batch_id_width(self):
        with pytest.raises(IndexOutOfRangeException):
            public_input_preimage(1, 2, 2**64, 4, 5, STORAGE_HASH)


class TestBinding:
    """Tests for pub0."""

    def test_masked_digest(self):
        digest = sha256(public_input_preimage(*ARGS))
        expected = int.from_bytes(digest, "big") & ((1 << PUBLIC_INPUT_BITS) - 1)
        assert bind_public_input(*ARGS) == expected

    def test_below_bound(self):
        for batch_id in range(20):
            assert bind_public_input(1, 2, batch_id, 0, 0, STORAGE_HASH) < 2**253

    @pytest.mark.parametrize("index", range(6))
    def test_every_field_bound(self, index):
        changed = list(ARGS)
        if index == 5:
            changed[5] = sha256(b"other")
        else:
            changed[index] += 1
        assert bind_public_input(*changed) != bind_public_input(*ARGS)

    def test_verify(self):
        verify_public_input(bind_public_input(*ARGS), *ARGS)
        with pytest.raises(DigestMismatchException):
            verify_public_input(bind_public_input(*ARGS) ^ 1, *ARGS)
