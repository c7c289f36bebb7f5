"""
Batch Storage Digests
Digests binding the exact ordered contents of all CAP slots.

Digest paths:
1. short (canonical): sha256(concat of CAP 9-byte records)
2. extended (auxiliary): sha256(concat of CAP 15-byte records)
3. chain (auxiliary): acc = 0; acc = H(acc, record) per 9-byte record,
   read as a big-endian integer; result H(acc, batch_id, count) as
   32 big-endian bytes

The deployment picks which path is bound into the public input. All
three are always computed so every external consumer can recompute the
one it uses and compare bit-for-bit.
"""
from __future__ import annotations

from typing import Sequence

from trustledger.crypto.field_codec import bytes_to_int, field_to_bytes32
from trustledger.crypto.hashing import field_hash, sha256
from trustledger.schemas.constants import SHORT_RECORD_SIZE
from trustledger.schemas.errors import ConfigurationException, DigestMismatchException
from trustledger.schemas.operations import Batch, EdgeOperation
from trustledger.schemas.transition import STORAGE_FORMATS
from trustledger.transition.records import (
    encode_extended_records,
    encode_short_records,
    split_records,
)


def short_storage_hash(slots: Sequence[EdgeOperation]) -> bytes:
    """Canonical storage hash over 9-byte records."""
    return sha256(encode_short_records(slots))


def extended_storage_hash(slots: Sequence[EdgeOperation]) -> bytes:
    """Auxiliary storage hash over 15-byte records."""
    return sha256(encode_extended_records(slots))


def chained_storage_hash(
    slots: Sequence[EdgeOperation],
    batch_id: int,
    count: int,
) -> bytes:
    """Auxiliary running-hash digest, binding batch_id and count."""
    acc = 0
    for record in split_records(encode_short_records(slots), SHORT_RECORD_SIZE):
        acc = field_hash(acc, bytes_to_int(record))
    return field_to_bytes32(field_hash(acc, batch_id, count))


def storage_hash_for(batch: Batch, storage_format: str = "short") -> bytes:
    """
    Storage hash of a batch via the named path.

    Raises:
        ConfigurationException: If storage_format is unknown.
    """
    if storage_format == "short":
        return short_storage_hash(batch.slots)
    if storage_format == "extended":
        return extended_storage_hash(batch.slots)
    if storage_format == "chain":
        return chained_storage_hash(batch.slots, batch.batch_id, batch.count)
    raise ConfigurationException(
        f"Unknown storage format {storage_format!r}; expected one of {STORAGE_FORMATS}",
        setting="storage_format",
    )


def verify_storage_hash(
    batch: Batch,
    claimed: bytes,
    storage_format: str = "short",
) -> None:
    """
    Recompute a storage hash and compare it with a claimed value.

    Raises:
        DigestMismatchException: If they differ.
    """
    actual = storage_hash_for(batch, storage_format)
    if actual != claimed:
        raise DigestMismatchException(
            f"Storage hash mismatch ({storage_format})",
            details={
                "storage_format": storage_format,
                "expected": claimed.hex(),
                "actual": actual.hex(),
            },
        )


__all__ = [
    "short_storage_hash",
    "extended_storage_hash",
    "chained_storage_hash",
    "storage_hash_for",
    "verify_storage_hash",
]
