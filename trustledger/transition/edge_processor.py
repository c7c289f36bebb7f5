"""
Edge Processor
Applies one edge operation to both endpoints of an edge.

Processing order (fixed canonicalization):
1. Validate opcode and both position hints (also for NOP)
2. NOP returns the current root without looking at the witnesses
3. Check each endpoint witness against its claimed leaf value
4. Resolve lo (element=hi) and hi (element=lo), keep them symmetric
5. Update lo against the current root -> intermediate root
6. Update hi against the intermediate root -> new root

The hi witness path must therefore be produced against the root that
results from applying lo first.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from trustledger.graph.action_resolver import (
    ResolvedAction,
    coordinate_actions,
    parse_opcode,
    resolve_action,
)
from trustledger.graph.neighbor_set import (
    EMPTY_NEIGHBORS,
    apply_action,
    check_degree,
    leaf_value,
)
from trustledger.merkle.sparse_merkle import (
    EMPTY_LEAF,
    MerkleFunction,
    merkle_function_for,
    update,
    verify_absence,
)
from trustledger.schemas.constants import NEIGHBOR_CAPACITY, UINT32_MAX
from trustledger.schemas.errors import (
    DegreeInvariantException,
    IndexOutOfRangeException,
    InvalidInclusionProofException,
    InvalidNeighborActionException,
)
from trustledger.schemas.operations import EdgeOperation, EndpointWitness, OpCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointTransition:
    """Outcome of an edge operation on one endpoint."""
    key: int
    element: int
    resolved: ResolvedAction
    fnc: MerkleFunction
    old_value: int
    new_value: int
    neighbors: tuple[int, ...]
    degree: int


@dataclass(frozen=True)
class EdgeTransition:
    """Outcome of one edge operation."""
    opcode: OpCode
    old_root: int
    intermediate_root: int
    new_root: int
    lo: EndpointTransition | None = None
    hi: EndpointTransition | None = None

    @property
    def changed(self) -> bool:
        return self.new_root != self.old_root


def _check_position(position: int, name: str) -> None:
    if position < 0 or position >= NEIGHBOR_CAPACITY:
        raise IndexOutOfRangeException(
            f"{name} {position} outside [0, {NEIGHBOR_CAPACITY})",
            field_path=name,
            value=position,
        )


def check_endpoint_witness(key: int, witness: EndpointWitness) -> None:
    """
    Check that a witness describes a consistent account state.

    Raises:
        DegreeInvariantException: If a new account is not empty, or the
            array/degree pair of an existing account is inconsistent
        InvalidInclusionProofException: If old_value is not the leaf value
            of the claimed (degree, neighbors)
    """
    if witness.is_new:
        if witness.degree != 0 or tuple(witness.neighbors) != EMPTY_NEIGHBORS:
            raise DegreeInvariantException(
                f"New account {key} must start empty",
                degree=witness.degree,
                details={"key": key},
            )
        return

    check_degree(witness.neighbors, witness.degree)
    expected = leaf_value(witness.degree, witness.neighbors)
    if witness.old_value != expected:
        raise InvalidInclusionProofException(
            f"Old leaf value of account {key} does not match its neighbor set",
            key=key,
        )


def _transition_endpoint(
    key: int,
    element: int,
    opcode: OpCode,
    witness: EndpointWitness,
    resolved: ResolvedAction,
) -> EndpointTransition:
    neighbors, degree = apply_action(
        witness.neighbors,
        witness.degree,
        element,
        witness.position,
        resolved.action,
    )
    if resolved.changes_state:
        new_value = leaf_value(degree, neighbors)
    else:
        new_value = EMPTY_LEAF if witness.is_new else witness.old_value
    return EndpointTransition(
        key=key,
        element=element,
        resolved=resolved,
        fnc=merkle_function_for(opcode, witness.is_new),
        old_value=EMPTY_LEAF if witness.is_new else witness.old_value,
        new_value=new_value,
        neighbors=neighbors,
        degree=degree,
    )


def _apply_endpoint(root: int, endpoint: EndpointTransition, witness: EndpointWitness) -> int:
    if endpoint.fnc == MerkleFunction.INSERT and not endpoint.resolved.changes_state:
        # Nothing to insert; the absence claim must still hold
        if not verify_absence(root, endpoint.key, witness.siblings):
            raise InvalidInclusionProofException(
                f"Key {endpoint.key} is not absent under the current root",
                key=endpoint.key,
            )
        return root
    return update(
        root,
        endpoint.key,
        endpoint.old_value,
        endpoint.new_value,
        witness.is_new,
        witness.siblings,
        endpoint.fnc,
    )


def apply_edge_operation(current_root: int, op: EdgeOperation) -> EdgeTransition:
    """
    Apply one edge operation against a root.

    Args:
        current_root: Root before the operation
        op: Edge operation with witnesses for both endpoints

    Returns:
        EdgeTransition with intermediate and new roots

    Raises:
        InvalidOpcodeException: Opcode outside {NOP, ADD, REVOKE}
        IndexOutOfRangeException: Position hint outside [0, 64)
        InvalidNeighborActionException: Endpoints not 0 < lo < hi < 2^32
        DegreeInvariantException: Inconsistent endpoint state
        InvalidInclusionProofException: Witness does not match the root
    """
    opcode = parse_opcode(op.opcode)
    _check_position(op.lo_witness.position, "lo_witness.position")
    _check_position(op.hi_witness.position, "hi_witness.position")

    if opcode == OpCode.NOP:
        return EdgeTransition(
            opcode=opcode,
            old_root=current_root,
            intermediate_root=current_root,
            new_root=current_root,
        )

    if not (0 < op.lo < op.hi <= UINT32_MAX):
        raise InvalidNeighborActionException(
            f"Edge endpoints must satisfy 0 < lo < hi, got ({op.lo}, {op.hi})",
            details={"lo": op.lo, "hi": op.hi},
        )

    check_endpoint_witness(op.lo, op.lo_witness)
    check_endpoint_witness(op.hi, op.hi_witness)

    lo_resolved, hi_resolved = coordinate_actions(
        resolve_action(op.lo_witness.neighbors, op.hi, op.lo_witness.position, opcode),
        resolve_action(op.hi_witness.neighbors, op.lo, op.hi_witness.position, opcode),
    )
    if lo_resolved.degraded or hi_resolved.degraded:
        logger.warning(
            f"{opcode.name} ({op.lo}, {op.hi}) could not be applied; treated as NOP"
        )

    lo_end = _transition_endpoint(op.lo, op.hi, opcode, op.lo_witness, lo_resolved)
    hi_end = _transition_endpoint(op.hi, op.lo, opcode, op.hi_witness, hi_resolved)

    intermediate_root = _apply_endpoint(current_root, lo_end, op.lo_witness)
    new_root = _apply_endpoint(intermediate_root, hi_end, op.hi_witness)

    logger.debug(
        f"{opcode.name} ({op.lo}, {op.hi}): "
        f"{lo_resolved.action.name}/{hi_resolved.action.name}"
    )
    return EdgeTransition(
        opcode=opcode,
        old_root=current_root,
        intermediate_root=intermediate_root,
        new_root=new_root,
        lo=lo_end,
        hi=hi_end,
    )


__all__ = [
    "EndpointTransition",
    "EdgeTransition",
    "check_endpoint_witness",
    "apply_edge_operation",
]
