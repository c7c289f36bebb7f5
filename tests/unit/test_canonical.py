"""
Canonical JSON Unit Tests
Tests for trustledger/schemas/canonical.py
"""
import pytest

from trustledger.crypto.field_codec import FIELD_MODULUS
from trustledger.schemas.canonical import canonical_equals, canonicalize_value, dumps_canonical
from trustledger.schemas.errors import CanonicalizationException
from trustledger.schemas.operations import Batch, EdgeOperation, OpCode


class TestCanonicalize:
    """Tests for value canonicalization."""

    def test_sorted_compact(self):
        assert dumps_canonical({"b": 2, "a": [1, True, None]}) == '{"a":[1,true,null],"b":2}'

    def test_large_ints_as_hex(self):
        assert canonicalize_value(FIELD_MODULUS - 1) == hex(FIELD_MODULUS - 1)
        assert canonicalize_value(2**53 - 1) == 2**53 - 1

    def test_enum_and_bytes(self):
        assert canonicalize_value(OpCode.REVOKE) == 2
        assert canonicalize_value(b"\x01\xff") == "01ff"

    def test_float_rejected(self):
        with pytest.raises(CanonicalizationException) as exc_info:
            dumps_canonical({"x": [1.5]})
        assert exc_info.value.details["path"] == "x[0]"

    def test_unknown_type_rejected(self):
        with pytest.raises(CanonicalizationException):
            canonicalize_value(object())


class TestModels:
    """Tests for pydantic model serialization."""

    def test_batch_deterministic(self):
        a = Batch.padded(1, [EdgeOperation(opcode=1, lo=1, hi=2)], 2)
        b = Batch.padded(1, [EdgeOperation(opcode=1, lo=1, hi=2)], 2)
        assert dumps_canonical(a) == dumps_canonical(b)
        assert canonical_equals(a, b)

    def test_batch_difference_detected(self):
        a = Batch.padded(1, [EdgeOperation(opcode=1, lo=1, hi=2)], 2)
        b = Batch.padded(1, [EdgeOperation(opcode=1, lo=1, hi=3)], 2)
        assert not canonical_equals(a, b)
