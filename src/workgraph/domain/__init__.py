"""Domain model for workgraph.

Re-exports all public types for convenient access:
    from workgraph.domain import WorkItemNode, DependencyEdge, CycleError
"""
from workgraph.domain.edge import DependencyEdge
from workgraph.domain.errors import (
    CycleError,
    DependencyError,
    DuplicateEdgeError,
    NotFoundError,
    NotFoundKind,
    StoreError,
    ValidationError,
    ValidationReason,
)
from workgraph.domain.types import EdgeKey, SpecId, WorkItemId
from workgraph.domain.weights import DEFAULT_WEIGHTS, UNWEIGHTED, WeightScheme
from workgraph.domain.work_item import SizeEstimate, WorkItemNode, WorkItemType

__all__ = [
    "DependencyEdge",
    "CycleError",
    "DependencyError",
    "DuplicateEdgeError",
    "NotFoundError",
    "NotFoundKind",
    "StoreError",
    "ValidationError",
    "ValidationReason",
    "EdgeKey",
    "SpecId",
    "WorkItemId",
    "DEFAULT_WEIGHTS",
    "UNWEIGHTED",
    "WeightScheme",
    "SizeEstimate",
    "WorkItemNode",
    "WorkItemType",
]
