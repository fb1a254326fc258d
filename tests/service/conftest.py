"""Service fixtures.

spec-1 holds A(S), B(M), C(L), D(XS) and the unestimated E; spec-2
holds Z.  No edges to start with.
"""
from __future__ import annotations

import pytest

from workgraph.domain.work_item import WorkItemNode
from workgraph.service.graph_service import GraphService
from workgraph.store.memory_store import InMemoryDependencyStore, InMemoryWorkItemStore

SPEC_ITEMS = [
    ("A", "spec-1", "S"),
    ("B", "spec-1", "M"),
    ("C", "spec-1", "L"),
    ("D", "spec-1", "XS"),
    ("E", "spec-1", None),
    ("Z", "spec-2", "M"),
]


def seed_items() -> list[WorkItemNode]:
    return [
        WorkItemNode.create(id=i, spec_id=spec, title=f"Item {i}", size_estimate=size)
        for i, spec, size in SPEC_ITEMS
    ]


@pytest.fixture
def items() -> InMemoryWorkItemStore:
    return InMemoryWorkItemStore(seed_items())


@pytest.fixture
def store(items: InMemoryWorkItemStore) -> InMemoryDependencyStore:
    edges = InMemoryDependencyStore(items)
    items.on_delete(edges.delete_edges_for_item)
    return edges


@pytest.fixture
def service(items: InMemoryWorkItemStore, store: InMemoryDependencyStore) -> GraphService:
    return GraphService(items, store)
