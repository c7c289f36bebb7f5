"""
Keyed Sparse Merkle Tree - Update Protocol
Root-only verification and update of a depth-32 sparse Merkle tree.

The verifier side never holds the map: it checks a caller-supplied
sibling path against the current root and recombines the same path with
the new value to obtain the next root.

Canonical Commitment Rules (Hard Contracts):
1. Leaf node = leaf value; an absent key has the empty leaf value 0
2. Parent node = H(left, right)
3. Empty subtree digests: E[0] = 0, E[i+1] = H(E[i], E[i])
4. Sibling paths are ordered leaf-to-root (siblings[0] is at the leaf level)
5. Bit i of the key (LSB first) is 1 iff the running node is a right child
   at level i
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from trustledger.crypto.hashing import hash2
from trustledger.schemas.constants import MERKLE_DEPTH
from trustledger.schemas.errors import (
    IndexOutOfRangeException,
    InvalidInclusionProofException,
)
from trustledger.schemas.operations import OpCode


EMPTY_LEAF: int = 0


class MerkleFunction(IntEnum):
    """Leaf update kind."""

    NOP = 0
    INSERT = 1
    UPDATE = 2


def _compute_empty_hashes(depth: int) -> tuple[int, ...]:
    hashes = [EMPTY_LEAF]
    for _ in range(depth):
        hashes.append(hash2(hashes[-1], hashes[-1]))
    return tuple(hashes)


# EMPTY_HASHES[level] is the digest of an empty subtree of height `level`
EMPTY_HASHES: tuple[int, ...] = _compute_empty_hashes(MERKLE_DEPTH)


@dataclass(frozen=True)
class SparseMerkleProof:
    """
    Inclusion (or absence, when value is EMPTY_LEAF) proof for one key.

    Attributes:
        key: Account id
        value: Leaf value at key (EMPTY_LEAF if absent)
        siblings: Sibling digests, leaf-to-root
        root: Root the proof was produced against
    """
    key: int
    value: int
    siblings: tuple[int, ...]
    root: int

    def verify(self) -> bool:
        return verify_inclusion(self.root, self.key, self.value, self.siblings)


def empty_root() -> int:
    """Root of a tree with no keys."""
    return EMPTY_HASHES[MERKLE_DEPTH]


def _check_key(key: int) -> None:
    if key < 0 or key >= (1 << MERKLE_DEPTH):
        raise IndexOutOfRangeException(
            f"Key {key} outside [0, 2^{MERKLE_DEPTH})",
            field_path="key",
            value=key,
        )


def _check_siblings(key: int, siblings: Sequence[int]) -> None:
    if len(siblings) != MERKLE_DEPTH:
        raise InvalidInclusionProofException(
            f"Sibling path must have {MERKLE_DEPTH} entries, got {len(siblings)}",
            key=key,
        )


def compute_root(key: int, value: int, siblings: Sequence[int]) -> int:
    """
    Recombine a leaf value with its sibling path.

    Returns:
        The root implied by placing `value` at `key`.
    """
    _check_key(key)
    _check_siblings(key, siblings)
    node = value
    for level, sibling in enumerate(siblings):
        if (key >> level) & 1:
            node = hash2(sibling, node)
        else:
            node = hash2(node, sibling)
    return node


def verify_inclusion(root: int, key: int, value: int, siblings: Sequence[int]) -> bool:
    """True if `value` sits at `key` under `root`."""
    return compute_root(key, value, siblings) == root


def verify_absence(root: int, key: int, siblings: Sequence[int]) -> bool:
    """True if `key` holds the empty leaf under `root`."""
    return verify_inclusion(root, key, EMPTY_LEAF, siblings)


def merkle_function_for(opcode: int, is_new: bool) -> MerkleFunction:
    """
    Derive the leaf update kind of one endpoint.

    ADD on a new account inserts, ADD on an existing one updates,
    REVOKE always updates, NOP does nothing.
    """
    if opcode == OpCode.NOP:
        return MerkleFunction.NOP
    if opcode == OpCode.ADD and is_new:
        return MerkleFunction.INSERT
    return MerkleFunction.UPDATE


def update(
    root: int,
    key: int,
    old_value: int,
    new_value: int,
    is_new: bool,
    siblings: Sequence[int],
    fnc: MerkleFunction,
) -> int:
    """
    Apply one leaf update against a root.

    Args:
        root: Current root
        key: Account id
        old_value: Current leaf value (ignored for INSERT)
        new_value: Leaf value to write
        is_new: Whether the caller claims the key is absent
        siblings: Sibling path of key under root, leaf-to-root
        fnc: NOP, INSERT or UPDATE

    Returns:
        The new root (root itself for NOP)

    Raises:
        InvalidInclusionProofException: If the path does not prove the
            claimed old state, or is_new disagrees with fnc
        IndexOutOfRangeException: If key is outside the key space
    """
    fnc = MerkleFunction(fnc)
    if fnc == MerkleFunction.NOP:
        return root

    if fnc == MerkleFunction.INSERT:
        if not is_new:
            raise InvalidInclusionProofException(
                "INSERT requires a key claimed absent",
                key=key,
            )
        if not verify_absence(root, key, siblings):
            raise InvalidInclusionProofException(
                f"Key {key} is not absent under the current root",
                key=key,
            )
    else:
        if is_new:
            raise InvalidInclusionProofException(
                "UPDATE requires a key claimed present",
                key=key,
            )
        if not verify_inclusion(root, key, old_value, siblings):
            raise InvalidInclusionProofException(
                f"Sibling path does not prove the old value of key {key}",
                key=key,
            )

    return compute_root(key, new_value, siblings)


__all__ = [
    "EMPTY_LEAF",
    "EMPTY_HASHES",
    "MerkleFunction",
    "SparseMerkleProof",
    "empty_root",
    "compute_root",
    "verify_inclusion",
    "verify_absence",
    "merkle_function_for",
    "update",
]
