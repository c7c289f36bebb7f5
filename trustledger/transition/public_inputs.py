"""
Public Input Binder
Folds a state transition into the single scalar the external verifier checks.

Preimage (112 bytes, big-endian):
    old_root(32) | new_root(32) | batch_id(8) | start(4) | count(4) | storage_hash(32)

pub0 = low 253 bits of sha256(preimage), always < 2^253 < FIELD_MODULUS.
"""
from __future__ import annotations

from trustledger.crypto.field_codec import field_to_bytes32, mask_253, u32_be, u64_be
from trustledger.crypto.hashing import sha256
from trustledger.schemas.errors import DigestMismatchException, IndexOutOfRangeException

PREIMAGE_SIZE = 112


def public_input_preimage(
    old_root: int,
    new_root: int,
    batch_id: int,
    start: int,
    count: int,
    storage_hash: bytes,
) -> bytes:
    """
    Pack the public input preimage.

    Raises:
        IndexOutOfRangeException: If a field exceeds its width or
            storage_hash is not 32 bytes.
    """
    if len(storage_hash) != 32:
        raise IndexOutOfRangeException(
            f"storage_hash must be 32 bytes, got {len(storage_hash)}",
            field_path="storage_hash",
            value=len(storage_hash),
        )
    return b"".join([
        field_to_bytes32(old_root),
        field_to_bytes32(new_root),
        u64_be(batch_id, "batch_id"),
        u32_be(start, "start"),
        u32_be(count, "count"),
        storage_hash,
    ])


def bind_public_input(
    old_root: int,
    new_root: int,
    batch_id: int,
    start: int,
    count: int,
    storage_hash: bytes,
) -> int:
    """Compute pub0 for a transition."""
    preimage = public_input_preimage(old_root, new_root, batch_id, start, count, storage_hash)
    return mask_253(sha256(preimage))


def verify_public_input(
    claimed: int,
    old_root: int,
    new_root: int,
    batch_id: int,
    start: int,
    count: int,
    storage_hash: bytes,
) -> None:
    """
    Recompute pub0 and compare it with a claimed value.

    Raises:
        DigestMismatchException: If they differ.
    """
    actual = bind_public_input(old_root, new_root, batch_id, start, count, storage_hash)
    if actual != claimed:
        raise DigestMismatchException(
            "Public input mismatch",
            details={"expected": hex(claimed), "actual": hex(actual)},
        )


__all__ = [
    "PREIMAGE_SIZE",
    "public_input_preimage",
    "bind_public_input",
    "verify_public_input",
]
