"""Graph DTOs handed to the request layer.

Everything here is frozen and built from tuples: a GraphDTO may sit in
the cache and be returned to many concurrent readers at once.
to_dict() produces the wire shape (camelCase keys).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from workgraph.domain.types import WorkItemId
from workgraph.domain.work_item import WorkItemNode
from workgraph.graph.critical_path import CriticalPathResult
from workgraph.graph.snapshot import GraphSnapshot


@dataclass(frozen=True, slots=True)
class NodeDTO:
    id: WorkItemId
    title: str
    type: str
    size_estimate: str | None
    status: str

    @classmethod
    def from_node(cls, node: WorkItemNode) -> NodeDTO:
        return cls(
            id=node.id,
            title=node.title,
            type=node.type.value,
            size_estimate=node.size_estimate.value if node.size_estimate else None,
            status=node.status,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "sizeEstimate": self.size_estimate,
            "status": self.status,
        }


@dataclass(frozen=True, slots=True)
class EdgeDTO:
    from_id: WorkItemId
    to_id: WorkItemId
    is_critical: bool

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.from_id, "to": self.to_id, "isCritical": self.is_critical}


@dataclass(frozen=True, slots=True)
class GraphDTO:
    spec_id: str
    nodes: tuple[NodeDTO, ...]
    edges: tuple[EdgeDTO, ...]
    critical_path: tuple[WorkItemId, ...]
    cycles: tuple[tuple[WorkItemId, ...], ...]

    @classmethod
    def build(cls, snapshot: GraphSnapshot, analysis: CriticalPathResult) -> GraphDTO:
        return cls(
            spec_id=snapshot.spec_id,
            nodes=tuple(NodeDTO.from_node(n) for n in snapshot.nodes),
            edges=tuple(
                EdgeDTO(src, dst, analysis.is_critical(src, dst))
                for src, dst in snapshot.edge_ids()
            ),
            critical_path=tuple(analysis.path),
            cycles=tuple(tuple(c) for c in analysis.cycles),
        )

    def edge_set(self) -> set[tuple[WorkItemId, WorkItemId]]:
        return {(e.from_id, e.to_id) for e in self.edges}

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "criticalPath": list(self.critical_path),
            "cycles": [list(c) for c in self.cycles],
        }
