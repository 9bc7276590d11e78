"""Proximity sorting of work orders with a bounded result cache."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..config import settings
from ..models.domain import Coordinate, WorkOrder
from .geospatial import distance_km, proximity_score

logger = logging.getLogger(__name__)

CacheKey = tuple[float, float, int]


@dataclass(slots=True)
class ScoredWorkOrder:
    work_order: WorkOrder
    distance_km: Optional[float] = None
    proximity_score: Optional[float] = None


class SortCache:
    """Insertion-ordered TTL cache for sorted results.

    Entries expire ``ttl_ms`` after they were stored. Once more than
    ``max_entries`` results are held the oldest is dropped.
    """

    def __init__(
        self,
        ttl_ms: int | None = None,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = (ttl_ms if ttl_ms is not None else settings.sort_cache_ttl_ms) / 1000.0
        self.max_entries = max_entries if max_entries is not None else settings.sort_cache_max_entries
        self._clock = clock
        self._entries: OrderedDict[CacheKey, tuple[float, list[ScoredWorkOrder]]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(origin: Coordinate, count: int) -> CacheKey:
        return (origin.lat, origin.lng, count)

    def get(self, key: CacheKey) -> list[ScoredWorkOrder] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, result = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return list(result)

    def set(self, key: CacheKey, result: Sequence[ScoredWorkOrder]) -> None:
        self._entries.pop(key, None)
        self._entries[key] = (self._clock(), list(result))
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted proximity sort cache entry {evicted}")

    def clear(self) -> None:
        self._entries.clear()


class ProximitySorter:
    """Sort work orders so nearby, urgent ones come first."""

    def __init__(self, cache: SortCache | None = None, batch_size: int | None = None) -> None:
        self.cache = cache if cache is not None else SortCache()
        self.batch_size = batch_size or settings.proximity_batch_size

    def sort(
        self,
        work_orders: Sequence[WorkOrder],
        origin: Coordinate,
        *,
        max_results: int = 1000,
        use_cache: bool = True,
    ) -> list[ScoredWorkOrder]:
        if not work_orders:
            return []

        key = SortCache.make_key(origin, len(work_orders))
        if use_cache:
            cached = self.cache.get(key)
            if cached is not None:
                return cached[:max_results]

        located: list[WorkOrder] = []
        unlocated: list[ScoredWorkOrder] = []
        for order in work_orders:
            if order.coordinate is not None:
                located.append(order)
            else:
                unlocated.append(ScoredWorkOrder(work_order=order))

        scored: list[ScoredWorkOrder] = []
        for start in range(0, len(located), self.batch_size):
            for order in located[start : start + self.batch_size]:
                distance = distance_km(origin, order.coordinate)
                scored.append(
                    ScoredWorkOrder(
                        work_order=order,
                        distance_km=distance,
                        proximity_score=proximity_score(distance, order.priority),
                    )
                )

        scored.sort(key=lambda item: item.proximity_score)
        # cached untruncated, max_results applies per call
        result = scored + unlocated
        if use_cache:
            self.cache.set(key, result)
        return result[:max_results]
