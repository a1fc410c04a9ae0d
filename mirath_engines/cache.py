"""
Module: mirath_engines.cache
Responsibility:
    Bounded, thread-safe memo of successful distribution results keyed by
    the full normalized input.

Architecture position:
    Engines -- an explicitly owned component injected into
    DistributionEngine.  There is no module-level cache instance.

Invariants enforced:
    - len(cache) <= capacity at all times
    - get / put / evict run under one lock, so concurrent callers never
      observe a half-applied check-then-act sequence
    - FIFO evicts the oldest insertion; LRU evicts the least recently read
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass

from mirath_config.schema import CacheEviction
from mirath_kernel.domain.heirs import HeirCounts
from mirath_kernel.domain.result import DistributionResult
from mirath_kernel.domain.values import NormalizedEstate
from mirath_kernel.logging_config import get_logger

logger = get_logger("engines.cache")


@dataclass(frozen=True)
class CacheKey:
    madhab: str
    total: str
    funeral: str
    debts: str
    will: str
    currency: str
    heirs: tuple[tuple[str, int], ...]
    notices: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        madhab: str,
        estate: NormalizedEstate,
        heirs: HeirCounts,
        notices: tuple[str, ...] = (),
    ) -> CacheKey:
        return cls(
            madhab=madhab,
            total=str(estate.total),
            funeral=str(estate.funeral),
            debts=str(estate.debts),
            will=str(estate.will),
            currency=estate.currency,
            heirs=tuple(sorted((k.value, n) for k, n in heirs.present())),
            notices=notices,
        )


class ResultCache:
    """Bounded map from CacheKey to DistributionResult."""

    def __init__(self, capacity: int = 100, eviction: CacheEviction = CacheEviction.FIFO):
        if capacity < 1:
            raise ValueError(f"cache capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._eviction = CacheEviction(eviction)
        self._entries: OrderedDict[CacheKey, DistributionResult] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def eviction(self) -> CacheEviction:
        return self._eviction

    def get(self, key: CacheKey) -> DistributionResult | None:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self.hits += 1
            if self._eviction is CacheEviction.LRU:
                self._entries.move_to_end(key)
            return result

    def put(self, key: CacheKey, result: DistributionResult) -> None:
        if not result.success:
            return
        with self._lock:
            if key in self._entries:
                self._entries[key] = result
                if self._eviction is CacheEviction.LRU:
                    self._entries.move_to_end(key)
                return
            self._entries[key] = result
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("cache_evicted", extra={"madhab": evicted.madhab})

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
