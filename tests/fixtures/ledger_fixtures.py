"""
Ledger test fixtures.

Factories build real witnessed data through GraphState so tests exercise
the same witnesses a ledger collaborator would produce.
"""

from typing import Iterable, Optional, Sequence

from trustledger.config.runtime import (
    CacheConfig,
    DigestConfig,
    LedgerConfig,
    RuntimeConfig,
)
from trustledger.schemas.operations import Batch, EdgeOperation, OpCode
from trustledger.state.graph_state import GraphState

# Small capacity keeps hashing cheap in tests
TEST_CAPACITY = 4


def make_graph_state(edges: Iterable[tuple[int, int]] = ()) -> GraphState:
    """
    Create a GraphState with the given undirected edges already added.

    Args:
        edges: (a, b) pairs to ADD in order
    """
    state = GraphState()
    state.prepare_operations([(OpCode.ADD, a, b) for a, b in edges])
    return state


def make_edge_operation(
    state: Optional[GraphState] = None,
    opcode: int = OpCode.ADD,
    a: int = 11,
    b: int = 22,
    **metadata,
) -> EdgeOperation:
    """
    Witness one operation against a state (a fresh one by default).

    The state is advanced past the operation.
    """
    if state is None:
        state = GraphState()
    return state.prepare_operation(opcode, a, b, **metadata)


def make_batch(
    state: GraphState,
    requests: Sequence,
    batch_id: int = 1,
    capacity: int = TEST_CAPACITY,
    start: int = 0,
) -> Batch:
    """Witness requests against state and pad them into a batch."""
    return state.build_batch(requests, batch_id=batch_id, capacity=capacity, start=start)


def make_zero_batch(batch_id: int = 0, capacity: int = TEST_CAPACITY) -> Batch:
    """Batch with no active slots."""
    return Batch.padded(batch_id, [], capacity)


def make_config(
    capacity: int = TEST_CAPACITY,
    storage_format: str = "short",
    cache_enabled: bool = True,
    max_entries: int = 8,
) -> RuntimeConfig:
    """RuntimeConfig sized for tests."""
    return RuntimeConfig(
        ledger=LedgerConfig(batch_capacity=capacity),
        digest=DigestConfig(storage_format=storage_format),
        cache=CacheConfig(enabled=cache_enabled, max_entries=max_entries),
    )
