"""Store fixtures: every contract test runs against both backends."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from workgraph.domain.work_item import WorkItemNode
from workgraph.store.base import DependencyStoreBase
from workgraph.store.memory_store import InMemoryDependencyStore, InMemoryWorkItemStore
from workgraph.store.sqlite_store import SqliteStore


@dataclass
class Backend:
    name: str
    items: Any  # add_item / remove_item / get_item / get_items_for_spec
    edges: DependencyStoreBase


def make_item(item_id: str, spec_id: str = "spec-1", size: str | None = None) -> WorkItemNode:
    return WorkItemNode.create(id=item_id, spec_id=spec_id, title=item_id, size_estimate=size)


@pytest.fixture
def sqlite_store(tmp_path) -> SqliteStore:
    return SqliteStore(tmp_path / "graph.db", retry_delay=0)


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path) -> Backend:
    if request.param == "memory":
        items = InMemoryWorkItemStore()
        edges = InMemoryDependencyStore(items)
        items.on_delete(edges.delete_edges_for_item)
        b = Backend("memory", items, edges)
    else:
        store = SqliteStore(tmp_path / "graph.db", retry_delay=0)
        b = Backend("sqlite", store, store)
    for item_id in ("a", "b", "c", "d"):
        b.items.add_item(make_item(item_id))
    b.items.add_item(make_item("z", spec_id="spec-2"))
    b.items.add_item(make_item("y", spec_id="spec-2"))
    return b
