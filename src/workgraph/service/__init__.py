"""Public contract of the dependency engine."""
from workgraph.service.dto import EdgeDTO, GraphDTO, NodeDTO
from workgraph.service.graph_service import GraphService

__all__ = [
    "EdgeDTO",
    "GraphDTO",
    "GraphService",
    "NodeDTO",
]
