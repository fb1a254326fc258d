"""Graph algorithms for work-item dependency graphs."""

from workgraph.graph.critical_path import CriticalPathResult, analyze
from workgraph.graph.cycle_guard import (
    check_edge,
    find_path,
    would_create_cycle,
    would_create_cycle_in,
)
from workgraph.graph.scc import find_cycles, strongly_connected_components
from workgraph.graph.snapshot import GraphSnapshot
from workgraph.graph.topological import KahnResult, kahn_order

__all__ = [
    "CriticalPathResult",
    "GraphSnapshot",
    "KahnResult",
    "analyze",
    "check_edge",
    "find_cycles",
    "find_path",
    "kahn_order",
    "strongly_connected_components",
    "would_create_cycle",
    "would_create_cycle_in",
]
