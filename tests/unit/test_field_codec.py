"""
Field Codec Unit Tests
Tests for trustledger/crypto/field_codec.py
"""
import pytest

from trustledger.crypto.field_codec import (
    FIELD_MODULUS,
    PUBLIC_INPUT_BITS,
    bits_to_bytes,
    bytes32_to_field,
    bytes_to_bits,
    bytes_to_field,
    field_to_bytes32,
    low_bits,
    mask_253,
    to_field,
    u32_be,
    u64_be,
    u8_be,
    uint_to_bytes,
)
from trustledger.schemas.errors import IndexOutOfRangeException


class TestFieldEncoding:
    """Tests for 32-byte big-endian field encoding."""

    def test_small_values_are_big_endian(self):
        assert field_to_bytes32(1) == b"\x00" * 31 + b"\x01"
        assert field_to_bytes32(0x0102) == b"\x00" * 30 + b"\x01\x02"

    def test_modulus_reduces_to_zero(self):
        assert field_to_bytes32(FIELD_MODULUS) == b"\x00" * 32
        assert to_field(FIELD_MODULUS + 5) == 5

    def test_negative_rejected(self):
        with pytest.raises(IndexOutOfRangeException):
            field_to_bytes32(-1)

    def test_bytes32_roundtrip(self):
        value = FIELD_MODULUS - 1
        assert bytes32_to_field(field_to_bytes32(value)) == value

    def test_bytes32_rejects_noncanonical(self):
        with pytest.raises(IndexOutOfRangeException):
            bytes32_to_field(FIELD_MODULUS.to_bytes(32, "big"))

    def test_bytes32_rejects_wrong_length(self):
        with pytest.raises(IndexOutOfRangeException):
            bytes32_to_field(b"\x01" * 31)

    def test_bytes_to_field_reduces(self):
        assert bytes_to_field(b"\xff" * 32) == int.from_bytes(b"\xff" * 32, "big") % FIELD_MODULUS


class TestBits:
    """Tests for MSB-first bit expansion."""

    def test_msb_first(self):
        assert bytes_to_bits(b"\x80\x01") == [1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1]

    def test_pack_inverse(self):
        data = bytes(range(32))
        assert bits_to_bytes(bytes_to_bits(data)) == data

    def test_pack_rejects_partial_byte(self):
        with pytest.raises(IndexOutOfRangeException):
            bits_to_bytes([1, 0, 1])

    def test_pack_rejects_non_bits(self):
        with pytest.raises(IndexOutOfRangeException):
            bits_to_bytes([2, 0, 0, 0, 0, 0, 0, 0])


class TestUnsignedIntegers:
    """Tests for fixed-width unsigned encodings."""

    def test_widths(self):
        assert u8_be(0xAB) == b"\xab"
        assert u32_be(0x01020304) == b"\x01\x02\x03\x04"
        assert u64_be(1) == b"\x00" * 7 + b"\x01"

    def test_boundaries(self):
        assert u32_be(2**32 - 1) == b"\xff" * 4
        with pytest.raises(IndexOutOfRangeException):
            u32_be(2**32)
        with pytest.raises(IndexOutOfRangeException):
            u8_be(-1)

    def test_error_names_field(self):
        with pytest.raises(IndexOutOfRangeException) as exc_info:
            uint_to_bytes(256, 1, "stake_index")
        assert exc_info.value.details["field_path"] == "stake_index"


class TestMask253:
    """Tests for the public input mask."""

    def test_all_ones_digest(self):
        assert mask_253(b"\xff" * 32) == 2**PUBLIC_INPUT_BITS - 1

    def test_top_three_bits_dropped(self):
        digest = b"\xe0" + b"\x00" * 31
        assert mask_253(digest) == 0

    def test_low_bits_kept(self):
        digest = b"\x00" * 31 + b"\x2a"
        assert mask_253(digest) == 42

    def test_result_is_field_element(self):
        assert mask_253(b"\xff" * 32) < FIELD_MODULUS

    def test_wrong_length_rejected(self):
        with pytest.raises(IndexOutOfRangeException):
            mask_253(b"\x00" * 31)

    def test_low_bits(self):
        assert low_bits(0b1111, 2) == 0b11
