"""GraphService -- the three operations the request layer calls.

    get_graph(spec_id)                  -> GraphDTO
    add_dependency(from_id, to_id)      -> DependencyEdge
    remove_dependency(from_id, to_id)   -> None

Reads build a fresh snapshot and run the analyzer; nothing long-lived
is shared between requests except the optional cache.

Writes are serialized per spec.  add_dependency hands its cycle check to
the store's insert_edge_checked, which re-reads the spec and inserts as
one step: under the store lock in memory, in one ``begin immediate``
transaction in SQLite.  The per-spec lock keeps writers in this process
from queueing on the store; the store step is what keeps writers in
other processes from jointly closing a cycle.  Specs never share a lock,
so unrelated documents don't wait on each other.

Usage:
    items = InMemoryWorkItemStore(...)
    service = GraphService(items, InMemoryDependencyStore(items))
    service.add_dependency("story-2", "story-1")
    graph = service.get_graph("spec-1")
"""
from __future__ import annotations

import logging
from typing import Iterable

from workgraph.concurrency.graph_cache import GraphCache
from workgraph.concurrency.spec_locks import SpecLockTable
from workgraph.domain.edge import DependencyEdge
from workgraph.domain.errors import (
    DuplicateEdgeError,
    NotFoundError,
    NotFoundKind,
    ValidationError,
    ValidationReason,
)
from workgraph.domain.types import SpecId, WorkItemId
from workgraph.domain.weights import DEFAULT_WEIGHTS, WeightScheme
from workgraph.domain.work_item import WorkItemNode
from workgraph.graph.critical_path import CriticalPathResult, analyze
from workgraph.graph.cycle_guard import check_edge, would_create_cycle_in
from workgraph.graph.snapshot import GraphSnapshot
from workgraph.service.dto import GraphDTO
from workgraph.store.base import DependencyStoreBase, WorkItemLookup

log = logging.getLogger(__name__)


class GraphService:
    """Dependency graph queries and mutations for one item/edge store pair.

    Args:
        items: read-only work-item lookup.
        store: dependency edge store.
        weights: size-to-effort mapping for critical path scoring.
        cache_ttl: seconds to cache get_graph results; None disables it.
        locks: shared lock table, for services that front the same store.
    """

    def __init__(
        self,
        items: WorkItemLookup,
        store: DependencyStoreBase,
        *,
        weights: WeightScheme = DEFAULT_WEIGHTS,
        cache_ttl: float | None = None,
        locks: SpecLockTable | None = None,
    ) -> None:
        self._items = items
        self._store = store
        self._weights = weights
        self._cache = GraphCache(cache_ttl) if cache_ttl is not None else None
        self._locks = locks or SpecLockTable()

    @property
    def weights(self) -> WeightScheme:
        return self._weights

    # ---- reads -----------------------------------------------------------

    def load_snapshot(self, spec_id: SpecId) -> GraphSnapshot:
        items = self._items.get_items_for_spec(spec_id)
        edges = self._store.list_edges(spec_id)
        return GraphSnapshot.build(spec_id, items, edges)

    def analyze(self, spec_id: SpecId) -> CriticalPathResult:
        """Full analysis result, including total weight and bottleneck."""
        return analyze(self.load_snapshot(spec_id), self._weights)

    def get_graph(self, spec_id: SpecId) -> GraphDTO:
        generation = 0
        if self._cache is not None:
            generation = self._cache.generation(spec_id)
            cached = self._cache.get(spec_id)
            if cached is not None:
                return cached

        snapshot = self.load_snapshot(spec_id)
        result = analyze(snapshot, self._weights)
        if result.cycles:
            log.warning(
                "Spec %s has %d dependency cycle(s) in stored data: %s",
                spec_id, len(result.cycles), result.cycles,
            )
        graph = GraphDTO.build(snapshot, result)

        if self._cache is not None:
            self._cache.put(spec_id, graph, generation)
        return graph

    # ---- writes ----------------------------------------------------------

    def add_dependency(self, from_id: WorkItemId, to_id: WorkItemId) -> DependencyEdge:
        """Record that *from_id* cannot start until *to_id* is done.

        Raises:
            NotFoundError: either item doesn't exist
            ValidationError: self-dependency, cross-spec or duplicate
            CycleError: the edge would close a cycle
        """
        from_item = self._require_item(from_id)
        to_item = self._require_item(to_id)
        if from_item.spec_id != to_item.spec_id:
            raise ValidationError(ValidationReason.CROSS_SPEC, from_id, to_id)
        spec_id = from_item.spec_id

        edge = DependencyEdge(from_id=from_id, to_id=to_id, spec_id=spec_id)

        def check(items: list[WorkItemNode], edges: list[DependencyEdge]) -> None:
            snapshot = GraphSnapshot.build(spec_id, items, edges)
            for item_id in (from_id, to_id):
                if item_id not in snapshot:
                    # deleted or moved since the lookup above
                    raise NotFoundError(NotFoundKind.ITEM, item_id)
            check_edge(
                snapshot,
                snapshot.node(snapshot.index_of(from_id)),
                snapshot.node(snapshot.index_of(to_id)),
            )

        with self._locks.hold(spec_id):
            try:
                self._store.insert_edge_checked(edge, self._items, check)
            except DuplicateEdgeError as exc:
                raise ValidationError(ValidationReason.DUPLICATE, from_id, to_id) from exc
            self._invalidate(spec_id)

        log.info("Dependency added: %s -> %s (spec %s)", from_id, to_id, spec_id)
        return edge

    def remove_dependency(self, from_id: WorkItemId, to_id: WorkItemId) -> None:
        """Delete the edge from_id -> to_id.

        Raises NotFoundError if the dependent item or the edge is missing.
        """
        spec_id = self._require_item(from_id).spec_id
        with self._locks.hold(spec_id):
            self._store.delete_edge(from_id, to_id)
            self._invalidate(spec_id)
        log.info("Dependency removed: %s -> %s (spec %s)", from_id, to_id, spec_id)

    @staticmethod
    def would_create_cycle(
        from_id: WorkItemId,
        to_id: WorkItemId,
        edges: Iterable[tuple[WorkItemId, WorkItemId]],
    ) -> bool:
        """Check a proposed edge against an arbitrary (from, to) edge list."""
        return would_create_cycle_in(edges, from_id, to_id)

    # ---- helpers ---------------------------------------------------------

    def _require_item(self, item_id: WorkItemId) -> WorkItemNode:
        item = self._items.get_item(item_id)
        if item is None:
            raise NotFoundError(NotFoundKind.ITEM, item_id)
        return item

    def _invalidate(self, spec_id: SpecId) -> None:
        if self._cache is not None:
            self._cache.invalidate(spec_id)
