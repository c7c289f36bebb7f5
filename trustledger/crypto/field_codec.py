"""
Field Codec
Canonical big-endian conversions between bytes, bits and scalar field elements.

Every hashing step in the ledger goes through these helpers so that the
external verifier, which recomputes the public input over raw bytes,
sees exactly the same encodings.

Conventions:
- Scalars are Python ints in [0, FIELD_MODULUS)
- Multi-byte integers are big-endian
- Bit vectors are MSB-first per byte (bit 0 is the top bit of byte 0)
"""
from __future__ import annotations

from typing import Sequence

from trustledger.schemas.constants import UINT8_MAX, UINT32_MAX, UINT64_MAX
from trustledger.schemas.errors import IndexOutOfRangeException


# BN254 scalar field modulus (shared by the proof system and all hashes)
FIELD_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617

# Width of the public input mask; 2^253 < FIELD_MODULUS
PUBLIC_INPUT_BITS = 253


def to_field(value: int) -> int:
    """Reduce an integer into the scalar field."""
    return value % FIELD_MODULUS


def field_to_bytes32(value: int) -> bytes:
    """
    Serialize a field element as a 32-byte big-endian integer.

    Inputs at or above the modulus are reduced first (field semantics).

    Example:
        >>> field_to_bytes32(1).hex()
        '0000000000000000000000000000000000000000000000000000000000000001'
    """
    if value < 0:
        raise IndexOutOfRangeException(
            "Field element must be non-negative",
            field_path="value",
            value=value,
        )
    return to_field(value).to_bytes(32, byteorder="big")


def bytes_to_int(data: bytes) -> int:
    """Interpret bytes as an unsigned big-endian integer (no reduction)."""
    return int.from_bytes(data, byteorder="big", signed=False)


def bytes_to_field(data: bytes) -> int:
    """Interpret bytes as a big-endian integer reduced into the field."""
    return to_field(bytes_to_int(data))


def bytes32_to_field(data: bytes) -> int:
    """
    Decode a canonical 32-byte field element.

    Raises:
        IndexOutOfRangeException: If the input is not 32 bytes or encodes
            a value at or above the modulus.
    """
    if len(data) != 32:
        raise IndexOutOfRangeException(
            f"Expected 32 bytes, got {len(data)}",
            field_path="data",
            value=len(data),
        )
    value = bytes_to_int(data)
    if value >= FIELD_MODULUS:
        raise IndexOutOfRangeException(
            "Encoded value is not a canonical field element",
            field_path="data",
        )
    return value


def bytes_to_bits(data: bytes) -> list[int]:
    """Expand bytes into bits, MSB-first per byte."""
    bits: list[int] = []
    for byte in data:
        for k in range(7, -1, -1):
            bits.append((byte >> k) & 1)
    return bits


def bits_to_bytes(bits: Sequence[int]) -> bytes:
    """Pack MSB-first bits into bytes. Length must be a multiple of 8."""
    if len(bits) % 8 != 0:
        raise IndexOutOfRangeException(
            f"Bit length must be a multiple of 8, got {len(bits)}",
            field_path="bits",
            value=len(bits),
        )
    out = bytearray()
    for i in range(0, len(bits), 8):
        byte = 0
        for bit in bits[i:i + 8]:
            if bit not in (0, 1):
                raise IndexOutOfRangeException(
                    f"Bit values must be 0 or 1, got {bit}",
                    field_path="bits",
                    value=bit,
                )
            byte = (byte << 1) | bit
        out.append(byte)
    return bytes(out)


def uint_to_bytes(value: int, width: int, name: str = "value") -> bytes:
    """
    Encode an unsigned integer as `width` big-endian bytes.

    Raises:
        IndexOutOfRangeException: If value does not fit in `width` bytes.
    """
    if value < 0 or value >= (1 << (8 * width)):
        raise IndexOutOfRangeException(
            f"{name} does not fit in {width} byte(s): {value}",
            field_path=name,
            value=value,
        )
    return value.to_bytes(width, byteorder="big")


def u8_be(value: int, name: str = "value") -> bytes:
    return uint_to_bytes(value, 1, name)


def u32_be(value: int, name: str = "value") -> bytes:
    return uint_to_bytes(value, 4, name)


def u64_be(value: int, name: str = "value") -> bytes:
    return uint_to_bytes(value, 8, name)


def low_bits(value: int, n: int) -> int:
    """Keep the n least significant bits of an integer."""
    return value & ((1 << n) - 1)


def mask_253(digest: bytes) -> int:
    """
    Mask a 32-byte digest to its low 253 bits.

    The digest is read as a big-endian integer; the result is always
    below 2^253 and therefore a valid field element.
    """
    if len(digest) != 32:
        raise IndexOutOfRangeException(
            f"Digest must be 32 bytes, got {len(digest)}",
            field_path="digest",
            value=len(digest),
        )
    return low_bits(bytes_to_int(digest), PUBLIC_INPUT_BITS)


__all__ = [
    "FIELD_MODULUS",
    "PUBLIC_INPUT_BITS",
    "UINT8_MAX",
    "UINT32_MAX",
    "UINT64_MAX",
    "to_field",
    "field_to_bytes32",
    "bytes_to_int",
    "bytes_to_field",
    "bytes32_to_field",
    "bytes_to_bits",
    "bits_to_bytes",
    "uint_to_bytes",
    "u8_be",
    "u32_be",
    "u64_be",
    "low_bits",
    "mask_253",
]
