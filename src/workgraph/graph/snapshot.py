"""Immutable per-spec dependency graph, indexed by position.

A snapshot is built from one read of the work-item lookup and the
dependency store, used for a single request, then thrown away.  Nodes
live in a tuple sorted by id, so a node's index order is also its
lexicographic id order; the algorithms lean on that for deterministic
tie-breaking without comparing strings.

Edges point in the "depends on" direction: from_id -> to_id means
from_id cannot start until to_id is done.  Both forward (successors,
i.e. prerequisites) and reverse (predecessors, i.e. dependents)
adjacency are stored as tuples of indices, so in_degree is O(1).

Rows that don't belong here are dropped while building: edges whose
endpoints are missing from the node set (the cascade delete hasn't been
observed yet) or that sit in another spec.  Self-loops are kept on
purpose so corrupt data shows up in cycle diagnostics.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator

from workgraph.domain.edge import DependencyEdge
from workgraph.domain.types import EdgeKey, SpecId, WorkItemId
from workgraph.domain.work_item import WorkItemNode

log = logging.getLogger(__name__)


class GraphSnapshot:
    """Index-based arena of one spec's work items and dependency edges."""

    __slots__ = ("_spec_id", "_nodes", "_index", "_succ", "_pred", "_edges")

    def __init__(
        self,
        spec_id: SpecId,
        nodes: tuple[WorkItemNode, ...],
        edges: tuple[tuple[int, int], ...],
    ) -> None:
        self._spec_id = spec_id
        self._nodes = nodes
        self._index: dict[WorkItemId, int] = {n.id: i for i, n in enumerate(nodes)}
        succ: list[list[int]] = [[] for _ in nodes]
        pred: list[list[int]] = [[] for _ in nodes]
        for src, dst in edges:
            succ[src].append(dst)
            pred[dst].append(src)
        self._succ = tuple(tuple(sorted(s)) for s in succ)
        self._pred = tuple(tuple(sorted(p)) for p in pred)
        self._edges = edges

    @classmethod
    def build(
        cls,
        spec_id: SpecId,
        items: Iterable[WorkItemNode],
        edges: Iterable[DependencyEdge],
    ) -> GraphSnapshot:
        """Materialize a snapshot from raw store rows."""
        nodes = tuple(sorted(
            (item for item in items if item.spec_id == spec_id),
            key=lambda n: n.id,
        ))
        index = {n.id: i for i, n in enumerate(nodes)}

        pairs: set[tuple[int, int]] = set()
        dropped = 0
        for edge in edges:
            src = index.get(edge.from_id)
            dst = index.get(edge.to_id)
            if src is None or dst is None or edge.spec_id != spec_id:
                dropped += 1
                continue
            pairs.add((src, dst))
        if dropped:
            log.debug("Snapshot %s: dropped %d dangling edge(s)", spec_id, dropped)

        snap = cls(spec_id, nodes, tuple(sorted(pairs)))
        log.debug("Built snapshot %r", snap)
        return snap

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[WorkItemId, WorkItemId]],
        spec_id: SpecId = "adhoc",
    ) -> GraphSnapshot:
        """Snapshot over a bare edge list, with a stub node per endpoint."""
        pairs = list(pairs)
        ids = {i for pair in pairs for i in pair}
        items = [WorkItemNode.create(id=i, spec_id=spec_id) for i in ids]
        edges = [DependencyEdge(src, dst, spec_id) for src, dst in pairs]
        return cls.build(spec_id, items, edges)

    # ---- lookup ----------------------------------------------------------

    @property
    def spec_id(self) -> SpecId:
        return self._spec_id

    @property
    def nodes(self) -> tuple[WorkItemNode, ...]:
        return self._nodes

    def index_of(self, item_id: WorkItemId) -> int | None:
        return self._index.get(item_id)

    def id_of(self, index: int) -> WorkItemId:
        return self._nodes[index].id

    def node(self, index: int) -> WorkItemNode:
        return self._nodes[index]

    def has_node(self, item_id: WorkItemId) -> bool:
        return item_id in self._index

    def has_edge(self, from_id: WorkItemId, to_id: WorkItemId) -> bool:
        src = self._index.get(from_id)
        dst = self._index.get(to_id)
        if src is None or dst is None:
            return False
        return dst in self._succ[src]

    # ---- adjacency -------------------------------------------------------

    def successors(self, index: int) -> tuple[int, ...]:
        """Prerequisites of *index*: targets of its outgoing edges."""
        return self._succ[index]

    def predecessors(self, index: int) -> tuple[int, ...]:
        """Dependents of *index*: sources of edges pointing at it."""
        return self._pred[index]

    def in_degree(self, index: int) -> int:
        """Number of edges where this node is the ``to`` end."""
        return len(self._pred[index])

    def out_degree(self, index: int) -> int:
        return len(self._succ[index])

    def edges(self) -> Iterator[tuple[int, int]]:
        """Edges as index pairs, ordered by (from_id, to_id)."""
        return iter(self._edges)

    def edge_ids(self) -> Iterator[EdgeKey]:
        for src, dst in self._edges:
            yield self._nodes[src].id, self._nodes[dst].id

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    # ---- dunder ----------------------------------------------------------

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._index

    def __len__(self) -> int:
        return self.node_count

    def __repr__(self) -> str:
        return (
            f"GraphSnapshot(spec={self._spec_id!r}, "
            f"nodes={self.node_count}, edges={self.edge_count})"
        )
