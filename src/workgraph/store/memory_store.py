"""In-memory stores: plain dicts behind one lock each.

InMemoryDependencyStore keeps two structures:
  _edges:   (from_id, to_id) -> DependencyEdge   (the uniqueness index)
  _by_spec: spec_id -> set of (from_id, to_id)   (scoping index)

Every public method takes the store lock for its whole body, so
list_edges always sees one consistent state and never a half-applied
insert.  The lock is re-entrant: insert_edge_checked holds it across
"read edges, check, insert", and the cascade hook may re-enter it.

Given the item lookup, insert_edge refuses an edge whose endpoint is
gone.  That check runs under the store lock, and the item store runs
its cascade hooks only after the item is removed, so every interleaving
of a delete with an insert ends with no dangling edge:

    insert checks first:  edge stored, then the cascade removes it
    delete pops first:    insert sees the item missing and raises

InMemoryWorkItemStore stands in for the external work-item store.  Its
on_delete() hooks are how the cascade reaches the edge store:

    items = InMemoryWorkItemStore()
    edges = InMemoryDependencyStore(items)
    items.on_delete(edges.delete_edges_for_item)
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable

from workgraph.domain.edge import DependencyEdge
from workgraph.domain.errors import DuplicateEdgeError, NotFoundError, NotFoundKind
from workgraph.domain.types import EdgeKey, SpecId, WorkItemId
from workgraph.domain.work_item import WorkItemNode
from workgraph.store.base import DependencyStoreBase, EdgeCheck, WorkItemLookup

log = logging.getLogger(__name__)


class InMemoryDependencyStore(DependencyStoreBase):
    """Edge table for tests and single-process use.

    Args:
        items: lookup used to refuse edges whose endpoint doesn't exist.
            Without one, endpoints are not checked.
    """

    def __init__(self, items: WorkItemLookup | None = None) -> None:
        self._items = items
        self._edges: dict[EdgeKey, DependencyEdge] = {}
        self._by_spec: dict[SpecId, set[EdgeKey]] = {}
        self._lock = threading.RLock()

    def list_edges(self, spec_id: SpecId) -> list[DependencyEdge]:
        with self._lock:
            keys = sorted(self._by_spec.get(spec_id, ()))
            return [self._edges[k] for k in keys]

    def get_edge(self, from_id: WorkItemId, to_id: WorkItemId) -> DependencyEdge | None:
        with self._lock:
            return self._edges.get((from_id, to_id))

    def insert_edge(self, edge: DependencyEdge) -> None:
        with self._lock:
            if self._items is not None:
                for item_id in (edge.from_id, edge.to_id):
                    if self._items.get_item(item_id) is None:
                        raise NotFoundError(NotFoundKind.ITEM, item_id)
            if edge.key in self._edges:
                raise DuplicateEdgeError(edge.from_id, edge.to_id)
            self._edges[edge.key] = edge
            self._by_spec.setdefault(edge.spec_id, set()).add(edge.key)

    def insert_edge_checked(
        self, edge: DependencyEdge, items: WorkItemLookup, check: EdgeCheck
    ) -> None:
        with self._lock:
            check(items.get_items_for_spec(edge.spec_id), self.list_edges(edge.spec_id))
            self.insert_edge(edge)

    def delete_edge(self, from_id: WorkItemId, to_id: WorkItemId) -> DependencyEdge:
        with self._lock:
            edge = self._edges.pop((from_id, to_id), None)
            if edge is None:
                raise NotFoundError(NotFoundKind.EDGE, from_id, to_id)
            self._unindex(edge)
            return edge

    def delete_edges_for_item(self, item_id: WorkItemId) -> int:
        with self._lock:
            doomed = [e for k, e in self._edges.items() if item_id in k]
            for edge in doomed:
                del self._edges[edge.key]
                self._unindex(edge)
        if doomed:
            log.debug("Cascade removed %d edge(s) of item %s", len(doomed), item_id)
        return len(doomed)

    def count(self) -> int:
        with self._lock:
            return len(self._edges)

    def _unindex(self, edge: DependencyEdge) -> None:
        keys = self._by_spec.get(edge.spec_id)
        if keys is not None:
            keys.discard(edge.key)
            if not keys:
                del self._by_spec[edge.spec_id]


class InMemoryWorkItemStore(WorkItemLookup):
    """Work-item catalogue with delete hooks for cascading."""

    def __init__(self, items: Iterable[WorkItemNode] = ()) -> None:
        self._items: dict[WorkItemId, WorkItemNode] = {}
        self._hooks: list[Callable[[WorkItemId], object]] = []
        self._lock = threading.Lock()
        for item in items:
            self.add_item(item)

    def add_item(self, item: WorkItemNode) -> None:
        """Insert or replace an item."""
        with self._lock:
            self._items[item.id] = item

    def remove_item(self, item_id: WorkItemId) -> WorkItemNode:
        """Delete an item, then run the cascade hooks.

        Hooks run outside the item lock and after the item is gone.
        Raises NotFoundError(ITEM) if it doesn't exist.
        """
        with self._lock:
            item = self._items.pop(item_id, None)
        if item is None:
            raise NotFoundError(NotFoundKind.ITEM, item_id)
        for hook in self._hooks:
            hook(item_id)
        return item

    def on_delete(self, hook: Callable[[WorkItemId], object]) -> None:
        self._hooks.append(hook)

    def get_item(self, item_id: WorkItemId) -> WorkItemNode | None:
        with self._lock:
            return self._items.get(item_id)

    def get_items_for_spec(self, spec_id: SpecId) -> list[WorkItemNode]:
        with self._lock:
            return [i for i in self._items.values() if i.spec_id == spec_id]
