"""
Ledger State Transition
Edge and batch processing, storage digests and public input binding.

Usage:
    from trustledger.transition import process_batch

    result = process_batch(old_root, batch, capacity=16)
    result.new_root, result.storage_hash, result.public_input
"""
from .records import (
    ExtendedRecord,
    ShortRecord,
    decode_extended_record,
    decode_short_record,
    encode_extended_record,
    encode_extended_records,
    encode_short_record,
    encode_short_records,
    extended_record_of,
    short_record_of,
    split_records,
)
from .storage_hash import (
    chained_storage_hash,
    extended_storage_hash,
    short_storage_hash,
    storage_hash_for,
    verify_storage_hash,
)
from .public_inputs import (
    PREIMAGE_SIZE,
    bind_public_input,
    public_input_preimage,
    verify_public_input,
)
from .edge_processor import (
    EdgeTransition,
    EndpointTransition,
    apply_edge_operation,
    check_endpoint_witness,
)
from .batch_processor import (
    apply_batch_roots,
    check_batch_shape,
    compute_batch_digest,
    effective_operation,
    process_batch,
    verify_batch,
)
from .ledger import (
    LedgerTransition,
    TransitionCache,
    batch_contents_hash,
)


__all__ = [
    # Records
    "ExtendedRecord",
    "ShortRecord",
    "decode_extended_record",
    "decode_short_record",
    "encode_extended_record",
    "encode_extended_records",
    "encode_short_record",
    "encode_short_records",
    "extended_record_of",
    "short_record_of",
    "split_records",
    # Digests
    "chained_storage_hash",
    "extended_storage_hash",
    "short_storage_hash",
    "storage_hash_for",
    "verify_storage_hash",
    # Public input
    "PREIMAGE_SIZE",
    "bind_public_input",
    "public_input_preimage",
    "verify_public_input",
    # Edge
    "EdgeTransition",
    "EndpointTransition",
    "apply_edge_operation",
    "check_endpoint_witness",
    # Batch
    "apply_batch_roots",
    "check_batch_shape",
    "compute_batch_digest",
    "effective_operation",
    "process_batch",
    "verify_batch",
    # Facade
    "LedgerTransition",
    "TransitionCache",
    "batch_contents_hash",
]
