"""
Core cryptographic utilities.

Provides the field codec shared by every hashing step and the
SHA-256 based hashes used for commitments and digests.
"""
from .field_codec import (
    FIELD_MODULUS,
    PUBLIC_INPUT_BITS,
    bits_to_bytes,
    bytes32_to_field,
    bytes_to_bits,
    bytes_to_field,
    bytes_to_int,
    field_to_bytes32,
    low_bits,
    mask_253,
    to_field,
    u8_be,
    u32_be,
    u64_be,
    uint_to_bytes,
)
from .hashing import (
    field_hash,
    from_hex,
    hash2,
    hash_concat,
    sha256,
    to_hex,
)

__all__ = [
    "FIELD_MODULUS",
    "PUBLIC_INPUT_BITS",
    "bits_to_bytes",
    "bytes32_to_field",
    "bytes_to_bits",
    "bytes_to_field",
    "bytes_to_int",
    "field_to_bytes32",
    "low_bits",
    "mask_253",
    "to_field",
    "u8_be",
    "u32_be",
    "u64_be",
    "uint_to_bytes",
    "field_hash",
    "from_hex",
    "hash2",
    "hash_concat",
    "sha256",
    "to_hex",
]
