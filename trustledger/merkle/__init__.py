"""
Keyed Sparse Merkle Tree
Depth-32 sparse Merkle tree keyed by account id.

This module provides:
- sparse_merkle: root-only update protocol (verify a path, recombine it)
- SparseMerkleStore: in-memory map that produces the sibling paths

Canonical Commitment Rules:
1. Leaf node = leaf value, empty leaf = 0
2. Parent node = H(left, right)
3. Empty subtrees use precomputed EMPTY_HASHES
4. Sibling paths are leaf-to-root, key bits LSB first

Usage:
    from trustledger.merkle import SparseMerkleStore, MerkleFunction, update

    store = SparseMerkleStore()
    root = store.root
    siblings = store.siblings(7)
    new_root = update(root, 7, 0, leaf, True, siblings, MerkleFunction.INSERT)
"""
from .sparse_merkle import (
    EMPTY_HASHES,
    EMPTY_LEAF,
    MerkleFunction,
    SparseMerkleProof,
    compute_root,
    empty_root,
    merkle_function_for,
    update,
    verify_absence,
    verify_inclusion,
)
from .merkle_store import SparseMerkleStore


__all__ = [
    # Core types
    "EMPTY_HASHES",
    "EMPTY_LEAF",
    "MerkleFunction",
    "SparseMerkleProof",
    # Protocol functions
    "compute_root",
    "empty_root",
    "merkle_function_for",
    "update",
    "verify_absence",
    "verify_inclusion",
    # Store
    "SparseMerkleStore",
]
