"""Error taxonomy for the dependency engine.

Every error carries a client-facing ``code`` and the HTTP ``status``
the request layer should answer with.  Validation and cycle errors are
deterministic functions of the input and the current graph, so they
are never retried.  StoreError is the only transient class.
"""
from __future__ import annotations

from enum import Enum

from workgraph.domain.types import WorkItemId


class DependencyError(Exception):
    """Base class for every error raised by the engine."""
    code = "DEPENDENCY_ERROR"
    status = 500


class ValidationReason(Enum):
    SELF_DEPENDENCY = "self-dependency"
    CROSS_SPEC = "cross-spec"
    DUPLICATE = "duplicate"


_VALIDATION_MESSAGES = {
    ValidationReason.SELF_DEPENDENCY: "Cannot add self-dependency",
    ValidationReason.CROSS_SPEC: "Cannot add dependency across different specs",
    ValidationReason.DUPLICATE: "Dependency already exists",
}


class ValidationError(DependencyError):
    """The requested edge breaks a structural invariant."""
    code = "VALIDATION_ERROR"
    status = 400

    def __init__(self, reason: ValidationReason, from_id: WorkItemId, to_id: WorkItemId) -> None:
        self.reason = reason
        self.from_id = from_id
        self.to_id = to_id
        super().__init__(f"{_VALIDATION_MESSAGES[reason]}: {from_id} -> {to_id}")


class CycleError(DependencyError):
    """Adding from_id -> to_id would close a cycle.

    ``cycle`` is the loop the edge would create, written as
    [from_id, to_id, ..., from_id].
    """
    code = "CYCLE_DETECTED"
    status = 400

    def __init__(self, from_id: WorkItemId, to_id: WorkItemId, cycle: list[WorkItemId]) -> None:
        self.from_id = from_id
        self.to_id = to_id
        self.cycle = cycle
        super().__init__(
            "Adding this dependency would create a circular dependency: "
            + " -> ".join(cycle)
        )


class NotFoundKind(Enum):
    ITEM = "item"
    EDGE = "edge"


class NotFoundError(DependencyError):
    code = "NOT_FOUND"
    status = 404

    def __init__(self, kind: NotFoundKind, *ids: WorkItemId) -> None:
        self.kind = kind
        self.ids = ids
        if kind is NotFoundKind.ITEM:
            msg = f"Work item not found: {ids[0]}"
        else:
            msg = f"Dependency not found: {ids[0]} -> {ids[1]}"
        super().__init__(msg)


class DuplicateEdgeError(DependencyError):
    """Raised by a store when the ordered pair is already present."""
    code = "DUPLICATE"
    status = 409

    def __init__(self, from_id: WorkItemId, to_id: WorkItemId) -> None:
        self.from_id = from_id
        self.to_id = to_id
        super().__init__(f"Edge already stored: {from_id} -> {to_id}")


class StoreError(DependencyError):
    """Persistence failure that survived the store's own retries."""
    code = "STORE_ERROR"
    status = 500
