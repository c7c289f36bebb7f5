"""
Sparse Merkle Store
In-memory key -> leaf value map that maintains the tree nodes and
serves sibling paths.

This is the prover-side counterpart of sparse_merkle: it holds the full
map so it can hand out the witnesses the root-only update protocol checks.
Only nonempty nodes are stored; everything else falls back to the
empty subtree digests.
"""
from __future__ import annotations

from typing import Iterator

from trustledger.crypto.hashing import hash2
from trustledger.merkle.sparse_merkle import (
    EMPTY_HASHES,
    EMPTY_LEAF,
    SparseMerkleProof,
    compute_root,
)
from trustledger.schemas.constants import MERKLE_DEPTH
from trustledger.schemas.errors import IndexOutOfRangeException


class SparseMerkleStore:
    """
    Mutable sparse Merkle tree of depth 32 keyed by account id.

    Example:
        >>> store = SparseMerkleStore()
        >>> store.set(7, 12345)
        >>> proof = store.prove(7)
        >>> proof.verify()
        True
    """

    def __init__(self) -> None:
        self._leaves: dict[int, int] = {}
        # (level, index) -> digest, for nonempty nodes only; level 0 = leaves
        self._nodes: dict[tuple[int, int], int] = {}

    def __len__(self) -> int:
        return len(self._leaves)

    def __contains__(self, key: int) -> bool:
        return key in self._leaves

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._leaves))

    @property
    def root(self) -> int:
        return self._node(MERKLE_DEPTH, 0)

    def _node(self, level: int, index: int) -> int:
        return self._nodes.get((level, index), EMPTY_HASHES[level])

    def get(self, key: int) -> int:
        """Leaf value at key, EMPTY_LEAF if absent."""
        return self._leaves.get(key, EMPTY_LEAF)

    def siblings(self, key: int) -> tuple[int, ...]:
        """Sibling path of key, leaf-to-root."""
        self._check_key(key)
        return tuple(
            self._node(level, (key >> level) ^ 1)
            for level in range(MERKLE_DEPTH)
        )

    def prove(self, key: int) -> SparseMerkleProof:
        """Inclusion proof for key (absence proof if the key is unset)."""
        return SparseMerkleProof(
            key=key,
            value=self.get(key),
            siblings=self.siblings(key),
            root=self.root,
        )

    def set(self, key: int, value: int) -> None:
        """
        Write a leaf value and rehash its path.

        Setting EMPTY_LEAF removes the key.
        """
        self._check_key(key)
        if value == EMPTY_LEAF:
            self._leaves.pop(key, None)
        else:
            self._leaves[key] = value

        node = value
        index = key
        self._store(0, index, node)
        for level in range(MERKLE_DEPTH):
            sibling = self._node(level, index ^ 1)
            if index & 1:
                node = hash2(sibling, node)
            else:
                node = hash2(node, sibling)
            index >>= 1
            self._store(level + 1, index, node)

    def _store(self, level: int, index: int, digest: int) -> None:
        if digest == EMPTY_HASHES[level]:
            self._nodes.pop((level, index), None)
        else:
            self._nodes[(level, index)] = digest

    def copy(self) -> "SparseMerkleStore":
        clone = SparseMerkleStore()
        clone._leaves = dict(self._leaves)
        clone._nodes = dict(self._nodes)
        return clone

    def check_consistency(self) -> bool:
        """Recompute every leaf's root from its path; True if all agree."""
        root = self.root
        return all(
            compute_root(key, value, self.siblings(key)) == root
            for key, value in self._leaves.items()
        )

    @staticmethod
    def _check_key(key: int) -> None:
        if key < 0 or key >= (1 << MERKLE_DEPTH):
            raise IndexOutOfRangeException(
                f"Key {key} outside [0, 2^{MERKLE_DEPTH})",
                field_path="key",
                value=key,
            )


__all__ = ["SparseMerkleStore"]
