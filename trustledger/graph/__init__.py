"""
Neighbor sets and action resolution.

This module provides:
- Fixed-capacity descending neighbor arrays and their commitment
- The strict insert/remove primitive
- Lenient resolution of requested opcodes into effective actions

Usage:
    from trustledger.graph import make_neighbors, resolve_action, apply_action

    neighbors = make_neighbors([100, 80, 60, 10])
    resolved = resolve_action(neighbors, element=70, idx=2, requested_op=1)
    neighbors, degree = apply_action(neighbors, 4, 70, 2, resolved.action)
"""
from .neighbor_set import (
    EMPTY_NEIGHBORS,
    NeighborAction,
    apply_action,
    can_insert,
    check_degree,
    commitment,
    contains,
    count_neighbors,
    find_position,
    insert_at,
    is_full,
    leaf_value,
    make_neighbors,
    remove_at,
    validate_neighbors,
)
from .action_resolver import (
    ResolvedAction,
    coordinate_actions,
    parse_opcode,
    resolve_action,
)


__all__ = [
    "EMPTY_NEIGHBORS",
    "NeighborAction",
    "apply_action",
    "can_insert",
    "check_degree",
    "commitment",
    "contains",
    "count_neighbors",
    "find_position",
    "insert_at",
    "is_full",
    "leaf_value",
    "make_neighbors",
    "remove_at",
    "validate_neighbors",
    "ResolvedAction",
    "coordinate_actions",
    "parse_opcode",
    "resolve_action",
]
