"""Per-spec write serialization.

Two add_dependency calls on the same spec can each pass the cycle check
against the graph they saw and still form a cycle together (A -> B and
B -> A, committed at once).  Holding one lock per spec across
"load snapshot, check, insert" closes that window.

Locks are keyed by spec id, never shared between specs, so writers on
unrelated documents don't contend.  Entries are reference counted and
dropped as soon as nobody holds or waits on them, which keeps the table
proportional to the number of specs being written right now rather
than every spec ever touched.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from workgraph.domain.types import SpecId

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _Entry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0  # holders + waiters


class SpecLockTable:
    """Lock table keyed by spec id.

    Usage:
        locks = SpecLockTable()
        with locks.hold(spec_id):
            ...  # exclusive against other writers of spec_id only
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[SpecId, _Entry] = {}

    @contextmanager
    def hold(self, spec_id: SpecId) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(spec_id)
            if entry is None:
                entry = self._entries[spec_id] = _Entry()
                log.debug("Lock created for spec %s (%d live)", spec_id, len(self._entries))
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[spec_id]

    def is_locked(self, spec_id: SpecId) -> bool:
        with self._guard:
            entry = self._entries.get(spec_id)
            return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
