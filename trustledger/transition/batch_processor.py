"""
Batch Processor
Applies a fixed-capacity batch of edge operations and binds the result.

Algorithm:
1. Check capacity, count and protocol version
2. Every inactive slot (index >= count) must be an all-zero record
3. r[0] = old_root; r[i+1] = apply(r[i], slot i), inactive slots as NOP
4. Compare r[CAP] with the claimed new root, if one is given
5. Compute all storage digests and the public input

The batch is atomic: any failing slot aborts the whole batch and no
partial root is returned.
"""
from __future__ import annotations

import logging

from trustledger.schemas.errors import (
    DigestMismatchException,
    IndexOutOfRangeException,
    RootMismatchException,
    TrustLedgerException,
)
from trustledger.schemas.operations import Batch, EdgeOperation
from trustledger.schemas.transition import BatchDigest, BatchResult
from trustledger.schemas.versioning import (
    UnsupportedProtocolVersionError,
    assert_supported_protocol_version,
)
from trustledger.transition.edge_processor import apply_edge_operation
from trustledger.transition.public_inputs import bind_public_input, verify_public_input
from trustledger.transition.storage_hash import (
    chained_storage_hash,
    extended_storage_hash,
    short_storage_hash,
    storage_hash_for,
    verify_storage_hash,
)

logger = logging.getLogger(__name__)


def check_batch_shape(batch: Batch, capacity: int | None = None) -> None:
    """
    Validate capacity, count and inactive slots.

    Raises:
        IndexOutOfRangeException: Capacity or count out of range
        DigestMismatchException: An inactive slot carries nonzero fields
    """
    try:
        assert_supported_protocol_version(batch.protocol_version)
    except UnsupportedProtocolVersionError as e:
        raise IndexOutOfRangeException(
            str(e),
            field_path="protocol_version",
        ) from e

    if capacity is not None and batch.capacity != capacity:
        raise IndexOutOfRangeException(
            f"Batch has {batch.capacity} slots, expected {capacity}",
            field_path="slots",
            value=batch.capacity,
        )
    if batch.count > batch.capacity:
        raise IndexOutOfRangeException(
            f"count {batch.count} exceeds capacity {batch.capacity}",
            field_path="count",
            value=batch.count,
        )
    for i in range(batch.count, batch.capacity):
        if not batch.slots[i].is_zero_record:
            raise DigestMismatchException(
                f"Inactive slot {i} must be an all-zero record",
                slot=i,
            )


def effective_operation(batch: Batch, index: int) -> EdgeOperation:
    """Slot as fed to the edge processor; inactive slots become NOP."""
    if batch.is_active(index):
        return batch.slots[index]
    return EdgeOperation.nop()


def compute_batch_digest(
    batch: Batch,
    old_root: int,
    new_root: int,
    storage_format: str = "short",
) -> BatchDigest:
    """All storage digests plus the public input bound to the selected one."""
    storage_hash = storage_hash_for(batch, storage_format)
    return BatchDigest(
        storage_format=storage_format,
        storage_hash=storage_hash,
        short_storage_hash=short_storage_hash(batch.slots),
        extended_storage_hash=extended_storage_hash(batch.slots),
        chained_storage_hash=chained_storage_hash(batch.slots, batch.batch_id, batch.count),
        public_input=bind_public_input(
            old_root,
            new_root,
            batch.batch_id,
            batch.start,
            batch.count,
            storage_hash,
        ),
    )


def apply_batch_roots(old_root: int, batch: Batch) -> tuple[int, ...]:
    """
    Chain roots through every slot.

    Returns:
        (r[0], ..., r[CAP])

    Raises:
        TrustLedgerException: First failing slot, with its index in details
    """
    roots = [old_root]
    for i in range(batch.capacity):
        try:
            transition = apply_edge_operation(roots[-1], effective_operation(batch, i))
        except TrustLedgerException as e:
            e.details.setdefault("slot", i)
            logger.warning(f"Batch {batch.batch_id} rejected at slot {i}: {e.code}")
            raise
        roots.append(transition.new_root)
    return tuple(roots)


def process_batch(
    old_root: int,
    batch: Batch,
    *,
    claimed_new_root: int | None = None,
    capacity: int | None = None,
    storage_format: str = "short",
) -> BatchResult:
    """
    Apply a batch and compute its digests.

    Args:
        old_root: Root the batch is applied to
        batch: The batch
        claimed_new_root: If given, the final root must equal it
        capacity: If given, the batch must have exactly this many slots
        storage_format: Digest path bound into the public input

    Returns:
        BatchResult

    Raises:
        RootMismatchException: Final root differs from claimed_new_root
        TrustLedgerException: Any slot or shape validation failure
    """
    check_batch_shape(batch, capacity)
    roots = apply_batch_roots(old_root, batch)
    new_root = roots[-1]

    if claimed_new_root is not None and new_root != claimed_new_root:
        raise RootMismatchException(
            f"Batch {batch.batch_id} does not lead to the claimed root",
            expected=claimed_new_root,
            actual=new_root,
        )

    digest = compute_batch_digest(batch, old_root, new_root, storage_format)
    logger.info(
        f"Batch {batch.batch_id} applied: {batch.count}/{batch.capacity} active, "
        f"pub0={digest.public_input:#x}"
    )
    return BatchResult(
        batch_id=batch.batch_id,
        old_root=old_root,
        new_root=new_root,
        roots=roots,
        digest=digest,
    )


def verify_batch(
    old_root: int,
    new_root: int,
    batch: Batch,
    claimed_public_input: int,
    *,
    claimed_storage_hash: bytes | None = None,
    capacity: int | None = None,
    storage_format: str = "short",
) -> BatchResult:
    """
    Re-derive a claimed transition end to end.

    Raises:
        RootMismatchException: Replay does not reach new_root
        DigestMismatchException: Storage hash or public input differ
    """
    result = process_batch(
        old_root,
        batch,
        claimed_new_root=new_root,
        capacity=capacity,
        storage_format=storage_format,
    )
    if claimed_storage_hash is not None:
        verify_storage_hash(batch, claimed_storage_hash, storage_format)
    verify_public_input(
        claimed_public_input,
        old_root,
        new_root,
        batch.batch_id,
        batch.start,
        batch.count,
        result.storage_hash,
    )
    return result


__all__ = [
    "check_batch_shape",
    "effective_operation",
    "compute_batch_digest",
    "apply_batch_roots",
    "process_batch",
    "verify_batch",
]
