"""
Ledger Transition Facade
Config-bound entry points over the pure batch processor.

This module provides:
- TransitionCache: LRU of accepted transitions keyed by
  (old_root, batch contents hash, storage format)
- LedgerTransition: apply / evaluate / verify using RuntimeConfig

The transition is deterministic and side-effect free, so replaying a
cached result is indistinguishable from recomputing it. Rejected batches
are never cached.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional

from trustledger.config.runtime import RuntimeConfig, get_default_config
from trustledger.crypto.hashing import sha256
from trustledger.schemas.canonical import dumps_canonical
from trustledger.schemas.errors import RootMismatchException, TrustLedgerException
from trustledger.schemas.operations import Batch
from trustledger.schemas.transition import BatchResult, TransitionOutcome
from trustledger.transition.batch_processor import process_batch, verify_batch

logger = logging.getLogger(__name__)


def batch_contents_hash(batch: Batch) -> bytes:
    """SHA-256 of the canonical JSON of a batch, witnesses included."""
    return sha256(dumps_canonical(batch).encode("utf-8"))


class TransitionCache:
    """Bounded LRU of accepted batch transitions."""

    def __init__(self, max_entries: int = 256) -> None:
        self.max_entries = max_entries
        self._entries: OrderedDict[tuple[int, bytes, str], BatchResult] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def key_for(old_root: int, batch: Batch, storage_format: str) -> tuple[int, bytes, str]:
        return (old_root, batch_contents_hash(batch), storage_format)

    def get(self, key: tuple[int, bytes, str]) -> Optional[BatchResult]:
        result = self._entries.get(key)
        if result is None:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return result

    def put(self, key: tuple[int, bytes, str], result: BatchResult) -> None:
        if self.max_entries == 0:
            return
        self._entries[key] = result
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0


class LedgerTransition:
    """
    State transition bound to a runtime configuration.

    Example:
        >>> ledger = LedgerTransition()
        >>> result = ledger.apply(old_root, batch)
        >>> result.public_input < 2**253
        True
    """

    def __init__(self, config: RuntimeConfig | None = None) -> None:
        self.config = config or get_default_config()
        self.cache: TransitionCache | None = None
        if self.config.cache.enabled:
            self.cache = TransitionCache(self.config.cache.max_entries)

    @property
    def capacity(self) -> int:
        return self.config.ledger.batch_capacity

    @property
    def storage_format(self) -> str:
        return self.config.digest.storage_format

    def apply(
        self,
        old_root: int,
        batch: Batch,
        claimed_new_root: int | None = None,
    ) -> BatchResult:
        """
        Apply a batch, raising on rejection.

        Raises:
            TrustLedgerException: Any validation failure
        """
        key = None
        if self.cache is not None:
            key = TransitionCache.key_for(old_root, batch, self.storage_format)
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Transition cache hit for batch {batch.batch_id}")
                self._check_claim(cached, claimed_new_root)
                return cached

        result = process_batch(
            old_root,
            batch,
            claimed_new_root=claimed_new_root,
            capacity=self.capacity,
            storage_format=self.storage_format,
        )
        if self.cache is not None:
            self.cache.put(key, result)
        return result

    def evaluate(
        self,
        old_root: int,
        batch: Batch,
        claimed_new_root: int | None = None,
    ) -> TransitionOutcome:
        """Apply a batch, returning a result-or-error outcome instead of raising."""
        try:
            return TransitionOutcome.success(self.apply(old_root, batch, claimed_new_root))
        except TrustLedgerException as e:
            return TransitionOutcome.failure(e.to_error_model())

    def verify(
        self,
        old_root: int,
        new_root: int,
        batch: Batch,
        claimed_public_input: int,
        claimed_storage_hash: bytes | None = None,
    ) -> BatchResult:
        """Re-derive a claimed transition; raises on any mismatch."""
        return verify_batch(
            old_root,
            new_root,
            batch,
            claimed_public_input,
            claimed_storage_hash=claimed_storage_hash,
            capacity=self.capacity,
            storage_format=self.storage_format,
        )

    @staticmethod
    def _check_claim(result: BatchResult, claimed_new_root: int | None) -> None:
        if claimed_new_root is not None and result.new_root != claimed_new_root:
            raise RootMismatchException(
                f"Batch {result.batch_id} does not lead to the claimed root",
                expected=claimed_new_root,
                actual=result.new_root,
            )


__all__ = [
    "batch_contents_hash",
    "TransitionCache",
    "LedgerTransition",
]
