"""
Schemas & Canonicalization
File: transition.py

Purpose: Output schemas of the ledger state transition.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .constants import NEIGHBOR_CAPACITY
from .errors import TrustLedgerError

StorageFormat = Literal["short", "extended", "chain"]

STORAGE_FORMATS: tuple[str, ...] = ("short", "extended", "chain")


class BatchDigest(BaseModel):
    """
    Digests binding the exact contents of a batch.

    `storage_hash` is the one bound into the public input; which path
    produced it is recorded in `storage_format`. The other paths are kept
    so each external consumer can recompute its own.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    storage_format: StorageFormat = Field(default="short")
    storage_hash: bytes = Field(..., min_length=32, max_length=32)
    short_storage_hash: bytes = Field(..., min_length=32, max_length=32)
    extended_storage_hash: bytes = Field(..., min_length=32, max_length=32)
    chained_storage_hash: bytes = Field(..., min_length=32, max_length=32)
    public_input: int = Field(..., ge=0)


class BatchResult(BaseModel):
    """Successful application of a batch."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    batch_id: int
    old_root: int
    new_root: int
    roots: tuple[int, ...] = Field(
        ...,
        description="Root chain r[0]=old_root .. r[CAP]=new_root",
    )
    digest: BatchDigest

    @property
    def public_input(self) -> int:
        return self.digest.public_input

    @property
    def storage_hash(self) -> bytes:
        return self.digest.storage_hash


class TransitionOutcome(BaseModel):
    """
    Result-or-error variant returned by non-raising entry points.

    Exactly one of `result` / `error` is set.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool
    result: BatchResult | None = None
    error: TrustLedgerError | None = None

    @classmethod
    def success(cls, result: BatchResult) -> "TransitionOutcome":
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, error: TrustLedgerError) -> "TransitionOutcome":
        return cls(ok=False, error=error)


class AccountState(BaseModel):
    """Off-ledger view of one account, as mirrored by a witness builder."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    account_id: int = Field(..., ge=1)
    degree: int = Field(default=0, ge=0, le=NEIGHBOR_CAPACITY)
    neighbors: tuple[int, ...] = Field(
        default=(0,) * NEIGHBOR_CAPACITY,
        min_length=NEIGHBOR_CAPACITY,
        max_length=NEIGHBOR_CAPACITY,
    )
