"""
Hashing Utilities
Byte-level SHA-256 helpers and the scalar field hash used by commitments.

This module provides:
- SHA-256 hashing for raw bytes
- field_hash: SHA-256 over 32-byte big-endian words, reduced into the field
- hash2: the two-input node hash of the sparse Merkle tree
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- Every scalar is reduced mod FIELD_MODULUS and written as exactly
  32 bytes before hashing, so inputs of different arity never collide
- No randomness, no platform-dependent encodings
"""
from __future__ import annotations

import hashlib

from trustledger.crypto.field_codec import FIELD_MODULUS, field_to_bytes32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(left: bytes, right: bytes) -> bytes:
    """Hash the concatenation of two byte sequences."""
    return sha256(left + right)


def field_hash(*values: int) -> int:
    """
    Hash scalars into the field.

    Rule: H(x1..xn) = int(sha256(x1_BE32 || ... || xn_BE32)) mod p

    Args:
        *values: Integers interpreted as field elements

    Returns:
        Integer in [0, FIELD_MODULUS)
    """
    h = hashlib.sha256()
    for v in values:
        h.update(field_to_bytes32(v))
    return int.from_bytes(h.digest(), byteorder="big") % FIELD_MODULUS


def hash2(left: int, right: int) -> int:
    """Parent hash of two sparse Merkle tree nodes."""
    return field_hash(left, right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "sha256",
    "hash_concat",
    "field_hash",
    "hash2",
    "to_hex",
    "from_hex",
]
