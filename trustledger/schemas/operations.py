"""
Schemas & Canonicalization
File: operations.py

Purpose: Input schemas for the ledger state transition: edge operations,
their per-endpoint witnesses, and fixed-capacity batches.

Field constraints here only enforce wire widths (uint8/uint32/uint64).
Semantic checks (opcode set, position range, degree bounds, path validity)
belong to the transition so they surface as the typed ledger exceptions.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    MERKLE_DEPTH,
    NEIGHBOR_CAPACITY,
    UINT8_MAX,
    UINT32_MAX,
    UINT64_MAX,
)
from .versioning import PROTOCOL_VERSION


class OpCode(IntEnum):
    """Requested edge operation, as encoded in the record `op` byte."""

    NOP = 0
    ADD = 1
    REVOKE = 2


def _empty_neighbors() -> tuple[int, ...]:
    return (0,) * NEIGHBOR_CAPACITY


def _empty_siblings() -> tuple[int, ...]:
    return (0,) * MERKLE_DEPTH


class EndpointWitness(BaseModel):
    """
    Witness for one endpoint of an edge operation.

    Supplied by the caller; the transition only verifies it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    neighbors: tuple[int, ...] = Field(
        default_factory=_empty_neighbors,
        min_length=NEIGHBOR_CAPACITY,
        max_length=NEIGHBOR_CAPACITY,
        description="Descending neighbor ids, zero padded",
    )
    degree: int = Field(default=0, description="Number of neighbors")
    is_new: bool = Field(default=False, description="Account absent from the store")
    old_value: int = Field(default=0, ge=0, description="Current leaf value")
    siblings: tuple[int, ...] = Field(
        default_factory=_empty_siblings,
        min_length=MERKLE_DEPTH,
        max_length=MERKLE_DEPTH,
        description="Sibling path, leaf-to-root",
    )
    position: int = Field(default=0, description="Insert/remove position hint")


class EdgeOperation(BaseModel):
    """One slot of a batch: an edge operation plus both endpoint witnesses."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    opcode: int = Field(default=0, ge=0, le=UINT8_MAX)
    lo: int = Field(default=0, ge=0, le=UINT32_MAX)
    hi: int = Field(default=0, ge=0, le=UINT32_MAX)

    # Escrow metadata carried only by the extended record
    stake_index: int = Field(default=0, ge=0, le=UINT8_MAX)
    duration_index: int = Field(default=0, ge=0, le=UINT8_MAX)
    timestamp: int = Field(default=0, ge=0, le=UINT32_MAX)

    lo_witness: EndpointWitness = Field(default_factory=EndpointWitness)
    hi_witness: EndpointWitness = Field(default_factory=EndpointWitness)

    @classmethod
    def nop(cls) -> "EdgeOperation":
        """All-zero slot used to pad inactive batch positions."""
        return cls()

    @property
    def is_zero_record(self) -> bool:
        """True if every field serialized into a record is zero."""
        return not any(self.record_fields())

    def record_fields(self) -> tuple[int, int, int, int, int, int]:
        """(lo, hi, stake_index, duration_index, opcode, timestamp)."""
        return (
            self.lo,
            self.hi,
            self.stake_index,
            self.duration_index,
            self.opcode,
            self.timestamp,
        )


class Batch(BaseModel):
    """
    Ordered, fixed-capacity sequence of edge operations.

    Slots at index >= count are inactive and must be all-zero records.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    protocol_version: str = Field(default=PROTOCOL_VERSION)
    batch_id: int = Field(..., ge=0, le=UINT64_MAX)
    start: int = Field(default=0, ge=0, le=UINT32_MAX)
    count: int = Field(..., ge=0, le=UINT32_MAX)
    slots: tuple[EdgeOperation, ...] = Field(..., min_length=1)

    @property
    def capacity(self) -> int:
        return len(self.slots)

    def is_active(self, index: int) -> bool:
        return index < self.count

    @property
    def active_slots(self) -> tuple[EdgeOperation, ...]:
        return self.slots[: self.count]

    @classmethod
    def padded(
        cls,
        batch_id: int,
        operations: Sequence[EdgeOperation],
        capacity: int,
        start: int = 0,
    ) -> "Batch":
        """
        Build a batch from active operations, padding with NOP slots.

        Raises:
            ValueError: If more operations than capacity are given.
        """
        if len(operations) > capacity:
            raise ValueError(
                f"{len(operations)} operations exceed batch capacity {capacity}"
            )
        slots = tuple(operations) + tuple(
            EdgeOperation.nop() for _ in range(capacity - len(operations))
        )
        return cls(
            batch_id=batch_id,
            start=start,
            count=len(operations),
            slots=slots,
        )
