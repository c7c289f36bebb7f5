"""
Neighbor Set
Fixed-capacity, strictly descending neighbor array per account.

Layout Rules (Hard Contracts):
1. Exactly NEIGHBOR_CAPACITY (64) slots, stored as a tuple of ints
2. Nonzero entries strictly descending, followed by a zero (sentinel) tail
3. degree == number of nonzero entries
4. commitment = H(H(n[0:16]), H(n[16:32]), H(n[32:48]), H(n[48:64]))
5. leaf value = H(degree, commitment)

The exact positional layout feeds the commitment, so arrays are never
sorted or compacted implicitly: every change goes through the explicit
shift routines below.
"""
from __future__ import annotations

import bisect
from enum import IntEnum
from typing import Sequence

from trustledger.crypto.hashing import field_hash
from trustledger.schemas.constants import (
    COMMITMENT_CHUNK_WIDTH,
    NEIGHBOR_CAPACITY,
    SENTINEL,
    UINT32_MAX,
)
from trustledger.schemas.errors import (
    DegreeInvariantException,
    IndexOutOfRangeException,
    InvalidNeighborActionException,
)


class NeighborAction(IntEnum):
    """Effective action on a neighbor set."""

    NOP = 0
    INSERT = 1
    REMOVE = 2


EMPTY_NEIGHBORS: tuple[int, ...] = (SENTINEL,) * NEIGHBOR_CAPACITY


def make_neighbors(values: Sequence[int]) -> tuple[int, ...]:
    """
    Build a padded neighbor array from leading values.

    Values are taken as given; use validate_neighbors to check ordering.

    Example:
        >>> make_neighbors([100, 80])[:3]
        (100, 80, 0)
    """
    if len(values) > NEIGHBOR_CAPACITY:
        raise IndexOutOfRangeException(
            f"At most {NEIGHBOR_CAPACITY} neighbors allowed, got {len(values)}",
            field_path="neighbors",
            value=len(values),
        )
    return tuple(values) + (SENTINEL,) * (NEIGHBOR_CAPACITY - len(values))


def count_neighbors(neighbors: Sequence[int]) -> int:
    """Number of nonzero entries."""
    return sum(1 for v in neighbors if v != SENTINEL)


def validate_neighbors(neighbors: Sequence[int]) -> None:
    """
    Check the array layout invariant.

    Raises:
        DegreeInvariantException: If the array has the wrong length, holds
            values outside uint32, is not strictly descending over its
            nonzero prefix, or has a nonzero entry after a zero.
    """
    if len(neighbors) != NEIGHBOR_CAPACITY:
        raise DegreeInvariantException(
            f"Neighbor array must have {NEIGHBOR_CAPACITY} slots, got {len(neighbors)}"
        )
    seen_sentinel = False
    previous = None
    for i, value in enumerate(neighbors):
        if value < 0 or value > UINT32_MAX:
            raise DegreeInvariantException(
                f"Neighbor id out of uint32 range at slot {i}: {value}",
                details={"slot": i},
            )
        if value == SENTINEL:
            seen_sentinel = True
            continue
        if seen_sentinel:
            raise DegreeInvariantException(
                f"Nonzero neighbor after sentinel at slot {i}",
                details={"slot": i},
            )
        if previous is not None and previous <= value:
            raise DegreeInvariantException(
                f"Neighbors not strictly descending at slot {i}",
                details={"slot": i},
            )
        previous = value


def check_degree(neighbors: Sequence[int], degree: int) -> None:
    """
    Check layout and that degree matches the number of neighbors.

    Raises:
        DegreeInvariantException: On any mismatch.
    """
    validate_neighbors(neighbors)
    actual = count_neighbors(neighbors)
    if degree != actual:
        raise DegreeInvariantException(
            f"Degree {degree} does not match {actual} stored neighbors",
            degree=degree,
        )


def commitment(neighbors: Sequence[int]) -> int:
    """
    Chained commitment over the full 64-slot array.

    Four 16-wide chunk hashes are combined by one final hash.
    Degree is not part of the commitment; leaf_value binds it.
    """
    if len(neighbors) != NEIGHBOR_CAPACITY:
        raise DegreeInvariantException(
            f"Neighbor array must have {NEIGHBOR_CAPACITY} slots, got {len(neighbors)}"
        )
    chunks = [
        field_hash(*neighbors[i:i + COMMITMENT_CHUNK_WIDTH])
        for i in range(0, NEIGHBOR_CAPACITY, COMMITMENT_CHUNK_WIDTH)
    ]
    return field_hash(*chunks)


def leaf_value(degree: int, neighbors: Sequence[int]) -> int:
    """Ledger leaf value of an account: H(degree, commitment(neighbors))."""
    return field_hash(degree, commitment(neighbors))


def _check_index(idx: int) -> None:
    if idx < 0 or idx >= NEIGHBOR_CAPACITY:
        raise IndexOutOfRangeException(
            f"Position {idx} outside [0, {NEIGHBOR_CAPACITY})",
            field_path="position",
            value=idx,
        )


def is_full(neighbors: Sequence[int]) -> bool:
    return neighbors[NEIGHBOR_CAPACITY - 1] != SENTINEL


def can_insert(neighbors: Sequence[int], element: int, idx: int) -> bool:
    """
    INSERT preconditions at a position hint.

    Room left, nonzero element, and a strict descending gap:
    (idx == 0 or neighbors[idx-1] > element) and neighbors[idx] < element.
    """
    _check_index(idx)
    if element == SENTINEL or is_full(neighbors):
        return False
    left_ok = idx == 0 or neighbors[idx - 1] > element
    return left_ok and neighbors[idx] < element


def insert_at(neighbors: Sequence[int], element: int, idx: int) -> tuple[int, ...]:
    """Shift slots [idx..62] right by one and place element at idx."""
    out = list(neighbors)
    for k in range(NEIGHBOR_CAPACITY - 1, idx, -1):
        out[k] = out[k - 1]
    out[idx] = element
    return tuple(out)


def remove_at(neighbors: Sequence[int], idx: int) -> tuple[int, ...]:
    """Shift slots [idx+1..63] left by one and clear the last slot."""
    out = list(neighbors)
    for k in range(idx, NEIGHBOR_CAPACITY - 1):
        out[k] = out[k + 1]
    out[NEIGHBOR_CAPACITY - 1] = SENTINEL
    return tuple(out)


def apply_action(
    neighbors: Sequence[int],
    degree: int,
    element: int,
    idx: int,
    action: NeighborAction,
) -> tuple[tuple[int, ...], int]:
    """
    Apply an effective action, enforcing its preconditions strictly.

    Args:
        neighbors: Current 64-slot array
        degree: Current degree
        element: Neighbor id to insert/remove
        idx: Position hint
        action: NOP, INSERT or REMOVE

    Returns:
        (new_neighbors, new_degree)

    Raises:
        IndexOutOfRangeException: If idx is outside [0, 64)
        InvalidNeighborActionException: If an INSERT/REMOVE precondition fails
        DegreeInvariantException: If degree would leave [0, 64]
    """
    _check_index(idx)
    action = NeighborAction(action)

    if action == NeighborAction.NOP:
        return tuple(neighbors), degree

    if action == NeighborAction.INSERT:
        if not can_insert(neighbors, element, idx):
            raise InvalidNeighborActionException(
                f"Cannot insert {element} at position {idx}",
                element=element,
                index=idx,
            )
        if degree >= NEIGHBOR_CAPACITY:
            raise DegreeInvariantException(
                "Degree overflow on insert",
                degree=degree,
            )
        return insert_at(neighbors, element, idx), degree + 1

    if element == SENTINEL or neighbors[idx] != element:
        raise InvalidNeighborActionException(
            f"Cannot remove {element} at position {idx}",
            element=element,
            index=idx,
        )
    if degree <= 0:
        raise DegreeInvariantException(
            "Degree underflow on remove",
            degree=degree,
        )
    return remove_at(neighbors, idx), degree - 1


def find_position(neighbors: Sequence[int], element: int) -> int:
    """
    Binary search for the position hint of element.

    Returns the slot holding element if present, otherwise the first slot
    whose value is smaller (the insertion point), clamped to the last slot
    when the array is full.
    """
    # Negated values are ascending, sentinel tail included
    pos = bisect.bisect_left(neighbors, -element, key=lambda v: -v)
    return min(pos, NEIGHBOR_CAPACITY - 1)


def contains(neighbors: Sequence[int], element: int) -> bool:
    if element == SENTINEL:
        return False
    return neighbors[find_position(neighbors, element)] == element


__all__ = [
    "NeighborAction",
    "EMPTY_NEIGHBORS",
    "make_neighbors",
    "count_neighbors",
    "validate_neighbors",
    "check_degree",
    "commitment",
    "leaf_value",
    "is_full",
    "can_insert",
    "insert_at",
    "remove_at",
    "apply_action",
    "find_position",
    "contains",
]
