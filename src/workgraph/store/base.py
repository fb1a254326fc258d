"""Abstract persistence boundaries.

DependencyStoreBase is the only place dependency edges are read or
written.  WorkItemLookup is the read-only view of the external
work-item store; the engine never writes through it.

Implementations: memory_store (dicts behind one re-entrant lock) and
sqlite_store (relational, unique index + cascading foreign keys).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from workgraph.domain.edge import DependencyEdge
from workgraph.domain.types import SpecId, WorkItemId
from workgraph.domain.work_item import WorkItemNode

EdgeCheck = Callable[[list[WorkItemNode], list[DependencyEdge]], None]


class WorkItemLookup(ABC):
    """Read-only access to work items."""

    @abstractmethod
    def get_item(self, item_id: WorkItemId) -> WorkItemNode | None:
        """Return the item, or None if it doesn't exist."""
        ...

    @abstractmethod
    def get_items_for_spec(self, spec_id: SpecId) -> list[WorkItemNode]:
        """All items owned by *spec_id* (any order)."""
        ...


class DependencyStoreBase(ABC):
    """Edge CRUD, scoped per spec."""

    @abstractmethod
    def list_edges(self, spec_id: SpecId) -> list[DependencyEdge]:
        """Every edge of *spec_id*, ordered by (from_id, to_id).

        Must never return an edge whose endpoint has been deleted.
        """
        ...

    @abstractmethod
    def get_edge(self, from_id: WorkItemId, to_id: WorkItemId) -> DependencyEdge | None:
        ...

    @abstractmethod
    def insert_edge(self, edge: DependencyEdge) -> None:
        """Persist *edge*.

        Raises DuplicateEdgeError if (from_id, to_id) is already stored.
        """
        ...

    @abstractmethod
    def delete_edge(self, from_id: WorkItemId, to_id: WorkItemId) -> DependencyEdge:
        """Remove and return the edge.

        Raises NotFoundError(EDGE) if it isn't stored.
        """
        ...

    @abstractmethod
    def delete_edges_for_item(self, item_id: WorkItemId) -> int:
        """Cascade: drop every edge touching *item_id*, return how many."""
        ...

    @abstractmethod
    def insert_edge_checked(
        self, edge: DependencyEdge, items: WorkItemLookup, check: EdgeCheck
    ) -> None:
        """Re-read the spec's items and edges, run *check*, then insert.

        *check* raises to veto the insert.  The read, the check and the
        insert must be one atomic step against every other writer of the
        spec, including writers in other processes where the store is
        shared between them.
        """
        ...
