"""
Action Resolver Unit Tests
Tests for trustledger/graph/action_resolver.py
"""
import pytest

from trustledger.graph.action_resolver import (
    ResolvedAction,
    coordinate_actions,
    parse_opcode,
    resolve_action,
)
from trustledger.graph.neighbor_set import EMPTY_NEIGHBORS, NeighborAction, make_neighbors
from trustledger.schemas.errors import IndexOutOfRangeException, InvalidOpcodeException
from trustledger.schemas.operations import OpCode

NEIGHBORS = make_neighbors([100, 80, 60, 10])
FULL = tuple(range(200, 136, -1))


class TestParseOpcode:
    """Tests for opcode validation."""

    @pytest.mark.parametrize("value", [0, 1, 2])
    def test_known(self, value):
        assert parse_opcode(value) == OpCode(value)

    @pytest.mark.parametrize("value", [3, 255])
    def test_unknown(self, value):
        with pytest.raises(InvalidOpcodeException) as exc_info:
            parse_opcode(value)
        assert exc_info.value.details["opcode"] == value


class TestResolveAction:
    """Tests for effective action derivation."""

    def test_add_inserts_at_gap(self):
        r = resolve_action(NEIGHBORS, 70, 2, OpCode.ADD)
        assert r.action == NeighborAction.INSERT
        assert r.one_hot == (0, 1, 0)
        assert not r.degraded

    def test_add_existing_is_idempotent(self):
        r = resolve_action(NEIGHBORS, 60, 2, OpCode.ADD)
        assert r.action == NeighborAction.NOP
        assert not r.degraded

    def test_add_bad_hint_degrades(self):
        r = resolve_action(NEIGHBORS, 70, 0, OpCode.ADD)
        assert r.action == NeighborAction.NOP
        assert r.degraded

    def test_add_to_full_degrades(self):
        r = resolve_action(FULL, 300, 0, OpCode.ADD)
        assert r.action == NeighborAction.NOP
        assert r.degraded

    def test_revoke_present(self):
        r = resolve_action(NEIGHBORS, 60, 2, OpCode.REVOKE)
        assert r.action == NeighborAction.REMOVE
        assert r.one_hot == (0, 0, 1)

    @pytest.mark.parametrize("idx", [0, 2, 4, 63])
    def test_revoke_absent_is_nop(self, idx):
        r = resolve_action(NEIGHBORS, 70, idx, OpCode.REVOKE)
        assert r.action == NeighborAction.NOP
        assert not r.changes_state

    def test_nop(self):
        r = resolve_action(EMPTY_NEIGHBORS, 5, 0, OpCode.NOP)
        assert r.one_hot == (1, 0, 0)

    def test_position_out_of_range(self):
        with pytest.raises(IndexOutOfRangeException):
            resolve_action(NEIGHBORS, 70, 64, OpCode.ADD)

    def test_invalid_opcode(self):
        with pytest.raises(InvalidOpcodeException):
            resolve_action(NEIGHBORS, 70, 0, 3)


class TestCoordinateActions:
    """Tests for keeping both endpoints consistent."""

    def test_both_change(self):
        lo = ResolvedAction(NeighborAction.INSERT, OpCode.ADD)
        hi = ResolvedAction(NeighborAction.INSERT, OpCode.ADD)
        assert coordinate_actions(lo, hi) == (lo, hi)

    def test_neither_changes(self):
        lo = ResolvedAction(NeighborAction.NOP, OpCode.ADD)
        hi = ResolvedAction(NeighborAction.NOP, OpCode.ADD)
        assert coordinate_actions(lo, hi) == (lo, hi)

    def test_one_sided_degrades_both(self):
        lo = ResolvedAction(NeighborAction.INSERT, OpCode.ADD)
        hi = ResolvedAction(NeighborAction.NOP, OpCode.ADD, degraded=True)
        new_lo, new_hi = coordinate_actions(lo, hi)
        assert new_lo.action == NeighborAction.NOP
        assert new_hi.action == NeighborAction.NOP
        assert new_lo.degraded and new_hi.degraded
