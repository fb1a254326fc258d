"""Time-boxed cache of computed graphs, keyed by spec id.

get_graph is a pure function of persisted state, so caching it is only
an optimization: entries expire after ``ttl_seconds`` and every
mutation of a spec invalidates that spec's entry immediately.

The subtle part is a read racing a write:

    reader: load snapshot (old edges) ... compute ... put(graph)
    writer:                 insert edge, invalidate

If put() landed after invalidate() the stale graph would be served
until the TTL ran out.  Each spec therefore has a generation counter.
Readers capture it before loading the snapshot and hand it back to
put(); invalidate() bumps it, and put() refuses a value computed under
an older generation.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from workgraph.domain.types import SpecId

log = logging.getLogger(__name__)


class GraphCache:
    """TTL cache with per-key generations.

    Args:
        ttl_seconds: how long an entry stays fresh (must be > 0).
        clock: monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[SpecId, tuple[float, Any]] = {}  # spec -> (expires_at, value)
        self._generations: dict[SpecId, int] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def generation(self, spec_id: SpecId) -> int:
        with self._lock:
            return self._generations.get(spec_id, 0)

    def get(self, spec_id: SpecId) -> Any | None:
        """Fresh value for *spec_id*, or None.  Expired entries read as misses."""
        with self._lock:
            entry = self._entries.get(spec_id)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            return None
        log.debug("Graph cache hit for spec %s", spec_id)
        return value

    def put(self, spec_id: SpecId, value: Any, generation: int) -> bool:
        """Store *value* unless the spec changed since *generation* was read."""
        with self._lock:
            if self._generations.get(spec_id, 0) != generation:
                return False
            self._entries[spec_id] = (self._clock() + self._ttl, value)
            return True

    def invalidate(self, spec_id: SpecId) -> None:
        with self._lock:
            self._generations[spec_id] = self._generations.get(spec_id, 0) + 1
            self._entries.pop(spec_id, None)

    def clear(self) -> None:
        with self._lock:
            for spec_id in self._entries:
                self._generations[spec_id] = self._generations.get(spec_id, 0) + 1
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
