"""
Graph State Witness Builder
Off-ledger mirror of the trust graph that produces fully witnessed
edge operations and batches.

The transition only verifies witnesses; this is the side that searches
for them. It keeps every account's neighbor set and a SparseMerkleStore,
computes position hints by binary search, and reads the hi endpoint's
sibling path after applying lo, exactly as the transition replays it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from trustledger.graph.action_resolver import (
    ResolvedAction,
    coordinate_actions,
    parse_opcode,
    resolve_action,
)
from trustledger.graph.neighbor_set import (
    EMPTY_NEIGHBORS,
    apply_action,
    contains,
    find_position,
    leaf_value,
)
from trustledger.merkle.merkle_store import SparseMerkleStore
from trustledger.schemas.constants import UINT32_MAX
from trustledger.schemas.errors import InvalidNeighborActionException
from trustledger.schemas.operations import Batch, EdgeOperation, EndpointWitness, OpCode
from trustledger.schemas.transition import AccountState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeRequest:
    """An edge operation as requested by the ledger, before witnessing."""
    opcode: int
    a: int
    b: int
    stake_index: int = 0
    duration_index: int = 0
    timestamp: int = 0


RequestLike = Union[EdgeRequest, Sequence[int]]


def _as_request(request: RequestLike) -> EdgeRequest:
    if isinstance(request, EdgeRequest):
        return request
    return EdgeRequest(*request)


class GraphState:
    """
    Mutable mirror of accounts and the keyed Merkle store.

    Example:
        >>> state = GraphState()
        >>> old_root = state.root
        >>> batch = state.build_batch([(1, 11, 22)], batch_id=1, capacity=4)
        >>> state.has_edge(11, 22)
        True
    """

    def __init__(self) -> None:
        self._accounts: dict[int, AccountState] = {}
        self._store = SparseMerkleStore()

    @property
    def root(self) -> int:
        return self._store.root

    @property
    def store(self) -> SparseMerkleStore:
        return self._store

    def __contains__(self, account_id: int) -> bool:
        return account_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def account(self, account_id: int) -> AccountState | None:
        return self._accounts.get(account_id)

    def neighbors_of(self, account_id: int) -> tuple[int, ...]:
        state = self._accounts.get(account_id)
        return state.neighbors if state else EMPTY_NEIGHBORS

    def degree_of(self, account_id: int) -> int:
        state = self._accounts.get(account_id)
        return state.degree if state else 0

    def has_edge(self, a: int, b: int) -> bool:
        return contains(self.neighbors_of(a), b) and contains(self.neighbors_of(b), a)

    def copy(self) -> "GraphState":
        clone = GraphState()
        clone._accounts = dict(self._accounts)
        clone._store = self._store.copy()
        return clone

    def witness_for(self, account_id: int, element: int) -> EndpointWitness:
        """Witness of one endpoint against the current root."""
        state = self._accounts.get(account_id)
        neighbors = state.neighbors if state else EMPTY_NEIGHBORS
        return EndpointWitness(
            neighbors=neighbors,
            degree=state.degree if state else 0,
            is_new=state is None,
            old_value=self._store.get(account_id),
            siblings=self._store.siblings(account_id),
            position=find_position(neighbors, element),
        )

    def _commit(self, witness: EndpointWitness, key: int, element: int, resolved: ResolvedAction) -> None:
        if not resolved.changes_state:
            return
        neighbors, degree = apply_action(
            witness.neighbors,
            witness.degree,
            element,
            witness.position,
            resolved.action,
        )
        self._accounts[key] = AccountState(account_id=key, degree=degree, neighbors=neighbors)
        self._store.set(key, leaf_value(degree, neighbors))

    def prepare_operation(
        self,
        opcode: int,
        a: int,
        b: int,
        *,
        stake_index: int = 0,
        duration_index: int = 0,
        timestamp: int = 0,
    ) -> EdgeOperation:
        """
        Witness one edge operation and advance the mirror past it.

        Endpoints may be given in either order; they are sorted so the
        lower id is processed first.

        Raises:
            InvalidOpcodeException: Unknown opcode
            InvalidNeighborActionException: Invalid endpoints, or a REVOKE
                touching an account the ledger has never seen
        """
        op = parse_opcode(opcode)
        lo, hi = sorted((a, b))
        metadata = dict(
            stake_index=stake_index,
            duration_index=duration_index,
            timestamp=timestamp,
        )
        if op == OpCode.NOP:
            return EdgeOperation(opcode=op, lo=lo, hi=hi, **metadata)

        if lo == hi or lo == 0 or hi > UINT32_MAX:
            raise InvalidNeighborActionException(
                f"Invalid edge endpoints ({a}, {b})",
                details={"a": a, "b": b},
            )
        if op == OpCode.REVOKE and (lo not in self._accounts or hi not in self._accounts):
            raise InvalidNeighborActionException(
                f"Cannot revoke an edge of an unknown account ({lo}, {hi})",
                details={"lo": lo, "hi": hi},
            )

        lo_witness = self.witness_for(lo, hi)
        hi_neighbors = self.neighbors_of(hi)
        lo_resolved, hi_resolved = coordinate_actions(
            resolve_action(lo_witness.neighbors, hi, lo_witness.position, op),
            resolve_action(hi_neighbors, lo, find_position(hi_neighbors, lo), op),
        )

        self._commit(lo_witness, lo, hi, lo_resolved)
        # hi's path is taken against the intermediate root
        hi_witness = self.witness_for(hi, lo)
        self._commit(hi_witness, hi, lo, hi_resolved)

        logger.debug(
            f"Prepared {op.name} ({lo}, {hi}): "
            f"{lo_resolved.action.name}/{hi_resolved.action.name}"
        )
        return EdgeOperation(
            opcode=op,
            lo=lo,
            hi=hi,
            lo_witness=lo_witness,
            hi_witness=hi_witness,
            **metadata,
        )

    def prepare_operations(self, requests: Iterable[RequestLike]) -> list[EdgeOperation]:
        """
        Witness a sequence of requests atomically.

        Either every request is applied to the mirror or none is.
        """
        staged = self.copy()
        operations = []
        for request in requests:
            r = _as_request(request)
            operations.append(
                staged.prepare_operation(
                    r.opcode,
                    r.a,
                    r.b,
                    stake_index=r.stake_index,
                    duration_index=r.duration_index,
                    timestamp=r.timestamp,
                )
            )
        self._accounts = staged._accounts
        self._store = staged._store
        return operations

    def build_batch(
        self,
        requests: Sequence[RequestLike],
        batch_id: int,
        capacity: int,
        start: int = 0,
    ) -> Batch:
        """
        Witness requests and pad them into a fixed-capacity batch.

        Raises:
            ValueError: More requests than capacity
        """
        if len(requests) > capacity:
            raise ValueError(f"{len(requests)} requests exceed batch capacity {capacity}")
        operations = self.prepare_operations(requests)
        return Batch.padded(batch_id, operations, capacity, start=start)


__all__ = [
    "EdgeRequest",
    "GraphState",
]
