"""
Action Resolver
Maps a requested opcode plus a position hint to the effective action on
a neighbor set.

Resolution Rules:
- ADD:    element at hint   -> NOP (already present, idempotent)
          INSERT preconditions hold -> INSERT
          otherwise         -> NOP, flagged as degraded
- REVOKE: element at hint   -> REMOVE
          otherwise         -> NOP (removing a missing neighbor is idempotent)
- NOP:    NOP

Policy: lenient. A request that cannot be honoured degrades to NOP and is
never rejected here; the strict checks in neighbor_set.apply_action only
guard against actions this resolver would not emit.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from trustledger.graph.neighbor_set import NeighborAction, can_insert
from trustledger.schemas.constants import NEIGHBOR_CAPACITY, SENTINEL
from trustledger.schemas.errors import IndexOutOfRangeException, InvalidOpcodeException
from trustledger.schemas.operations import OpCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedAction:
    """
    One-hot effective action for one endpoint.

    Attributes:
        action: The effective action
        requested: The opcode that was asked for
        degraded: True when an ADD could not be honoured and became NOP
    """
    action: NeighborAction
    requested: OpCode
    degraded: bool = False

    @property
    def one_hot(self) -> tuple[int, int, int]:
        """(nop, insert, remove) flags; exactly one is set."""
        return (
            int(self.action == NeighborAction.NOP),
            int(self.action == NeighborAction.INSERT),
            int(self.action == NeighborAction.REMOVE),
        )

    @property
    def changes_state(self) -> bool:
        return self.action != NeighborAction.NOP


def parse_opcode(value: int) -> OpCode:
    """
    Validate a raw opcode byte.

    Raises:
        InvalidOpcodeException: If value is not NOP, ADD or REVOKE.
    """
    try:
        return OpCode(value)
    except ValueError as e:
        raise InvalidOpcodeException(
            f"Unknown opcode {value}",
            opcode=value,
        ) from e


def resolve_action(
    neighbors: Sequence[int],
    element: int,
    idx: int,
    requested_op: int,
) -> ResolvedAction:
    """
    Decide the effective action for one endpoint.

    Args:
        neighbors: Current 64-slot array of the endpoint
        element: The other endpoint's id
        idx: Caller-supplied position hint (verified, never searched)
        requested_op: Raw opcode of the edge operation

    Returns:
        ResolvedAction

    Raises:
        InvalidOpcodeException: If requested_op is unknown
        IndexOutOfRangeException: If idx is outside [0, 64)
    """
    op = parse_opcode(requested_op)
    if idx < 0 or idx >= NEIGHBOR_CAPACITY:
        raise IndexOutOfRangeException(
            f"Position {idx} outside [0, {NEIGHBOR_CAPACITY})",
            field_path="position",
            value=idx,
        )

    if op == OpCode.NOP:
        return ResolvedAction(NeighborAction.NOP, op)

    eq_at = element != SENTINEL and neighbors[idx] == element

    if op == OpCode.REVOKE:
        if eq_at:
            return ResolvedAction(NeighborAction.REMOVE, op)
        return ResolvedAction(NeighborAction.NOP, op)

    if eq_at:
        return ResolvedAction(NeighborAction.NOP, op)
    if can_insert(neighbors, element, idx):
        return ResolvedAction(NeighborAction.INSERT, op)

    logger.debug(f"ADD of {element} at position {idx} degraded to NOP")
    return ResolvedAction(NeighborAction.NOP, op, degraded=True)


def coordinate_actions(
    lo_action: ResolvedAction,
    hi_action: ResolvedAction,
) -> tuple[ResolvedAction, ResolvedAction]:
    """
    Keep an edge symmetric across its two endpoints.

    If exactly one side would change, both are degraded to NOP so an edge
    is never recorded on one endpoint only.
    """
    if lo_action.changes_state == hi_action.changes_state:
        return lo_action, hi_action
    logger.debug(
        f"Asymmetric resolution ({lo_action.action.name}, {hi_action.action.name}); "
        "degrading edge to NOP"
    )
    return (
        ResolvedAction(NeighborAction.NOP, lo_action.requested, degraded=True),
        ResolvedAction(NeighborAction.NOP, hi_action.requested, degraded=True),
    )


__all__ = [
    "ResolvedAction",
    "parse_opcode",
    "resolve_action",
    "coordinate_actions",
]
