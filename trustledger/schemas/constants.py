"""
Schemas & Canonicalization
File: constants.py

Purpose: Fixed protocol dimensions shared by schemas, codecs and the
transition. No imports, so any module may depend on it.
"""

# Neighbor set capacity per account (fixed-length array with sentinel 0)
NEIGHBOR_CAPACITY: int = 64

# Width of each commitment chunk; NEIGHBOR_CAPACITY / CHUNK_WIDTH sub-hashes
COMMITMENT_CHUNK_WIDTH: int = 16

# Sparse Merkle tree depth; supports keys in [0, 2^32)
MERKLE_DEPTH: int = 32

# Sentinel marking an unused neighbor slot; also the reserved account id
SENTINEL: int = 0

UINT8_MAX: int = (1 << 8) - 1
UINT32_MAX: int = (1 << 32) - 1
UINT64_MAX: int = (1 << 64) - 1

# Canonical record sizes in bytes
SHORT_RECORD_SIZE: int = 9
EXTENDED_RECORD_SIZE: int = 15
