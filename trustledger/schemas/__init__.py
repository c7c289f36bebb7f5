"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    UnsupportedProtocolVersionError,
    assert_supported_protocol_version,
)

# Protocol dimensions
from .constants import (
    COMMITMENT_CHUNK_WIDTH,
    EXTENDED_RECORD_SIZE,
    MERKLE_DEPTH,
    NEIGHBOR_CAPACITY,
    SENTINEL,
    SHORT_RECORD_SIZE,
    UINT8_MAX,
    UINT32_MAX,
    UINT64_MAX,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ConfigurationException,
    DegreeInvariantException,
    DigestMismatchException,
    ErrorCodes,
    IndexOutOfRangeException,
    InvalidInclusionProofException,
    InvalidNeighborActionException,
    InvalidOpcodeException,
    RootMismatchException,
    TrustLedgerError,
    TrustLedgerException,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
)

# Transition inputs
from .operations import (
    Batch,
    EdgeOperation,
    EndpointWitness,
    OpCode,
)

# Transition outputs
from .transition import (
    STORAGE_FORMATS,
    AccountState,
    BatchDigest,
    BatchResult,
    StorageFormat,
    TransitionOutcome,
)


__all__ = [
    # Versioning
    "PROTOCOL_VERSION",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "UnsupportedProtocolVersionError",
    "assert_supported_protocol_version",
    # Constants
    "COMMITMENT_CHUNK_WIDTH",
    "EXTENDED_RECORD_SIZE",
    "MERKLE_DEPTH",
    "NEIGHBOR_CAPACITY",
    "SENTINEL",
    "SHORT_RECORD_SIZE",
    "UINT8_MAX",
    "UINT32_MAX",
    "UINT64_MAX",
    # Errors
    "CanonicalizationException",
    "ConfigurationException",
    "DegreeInvariantException",
    "DigestMismatchException",
    "ErrorCodes",
    "IndexOutOfRangeException",
    "InvalidInclusionProofException",
    "InvalidNeighborActionException",
    "InvalidOpcodeException",
    "RootMismatchException",
    "TrustLedgerError",
    "TrustLedgerException",
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    # Operations
    "Batch",
    "EdgeOperation",
    "EndpointWitness",
    "OpCode",
    # Results
    "STORAGE_FORMATS",
    "AccountState",
    "BatchDigest",
    "BatchResult",
    "StorageFormat",
    "TransitionOutcome",
]
