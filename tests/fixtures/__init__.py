"""
Test fixtures package for trustledger tests.

Provides factory functions for ledger test objects:
- ledger_fixtures.py: graph states, witnessed operations and batches

Usage:
    from fixtures import make_graph_state, make_batch

    def test_something():
        state = make_graph_state([(11, 22)])
        batch = make_batch(state, [(1, 22, 33)])
"""

from .ledger_fixtures import (
    TEST_CAPACITY,
    make_batch,
    make_config,
    make_edge_operation,
    make_graph_state,
    make_zero_batch,
)

__all__ = [
    "TEST_CAPACITY",
    "make_batch",
    "make_config",
    "make_edge_operation",
    "make_graph_state",
    "make_zero_batch",
]
