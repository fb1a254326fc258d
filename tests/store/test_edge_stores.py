"""Contract tests shared by the in-memory and SQLite stores."""
from __future__ import annotations

import pytest

from workgraph.domain.edge import DependencyEdge
from workgraph.domain.errors import CycleError, DuplicateEdgeError, NotFoundError, NotFoundKind

from tests.store.conftest import Backend, make_item


def _keys(edges: list[DependencyEdge]) -> list[tuple[str, str]]:
    return [e.key for e in edges]


class TestEdgeCrud:
    def test_insert_and_list(self, backend: Backend) -> None:
        backend.edges.insert_edge(DependencyEdge("b", "c", "spec-1"))
        backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        backend.edges.insert_edge(DependencyEdge("a", "c", "spec-1"))
        assert _keys(backend.edges.list_edges("spec-1")) == [
            ("a", "b"), ("a", "c"), ("b", "c"),
        ]

    def test_list_scoped_to_spec(self, backend: Backend) -> None:
        backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        backend.edges.insert_edge(DependencyEdge("z", "y", "spec-2"))
        assert _keys(backend.edges.list_edges("spec-2")) == [("z", "y")]
        assert backend.edges.list_edges("spec-unknown") == []

    def test_get_edge(self, backend: Backend) -> None:
        edge = DependencyEdge("a", "b", "spec-1")
        backend.edges.insert_edge(edge)
        got = backend.edges.get_edge("a", "b")
        assert got is not None
        assert got.key == ("a", "b")
        assert got.spec_id == "spec-1"
        assert got.created_at == edge.created_at
        assert backend.edges.get_edge("b", "a") is None

    def test_duplicate_rejected(self, backend: Backend) -> None:
        backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        with pytest.raises(DuplicateEdgeError):
            backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        assert len(backend.edges.list_edges("spec-1")) == 1

    def test_delete_returns_edge(self, backend: Backend) -> None:
        backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        removed = backend.edges.delete_edge("a", "b")
        assert removed.key == ("a", "b")
        assert backend.edges.list_edges("spec-1") == []

    def test_delete_missing(self, backend: Backend) -> None:
        with pytest.raises(NotFoundError) as info:
            backend.edges.delete_edge("a", "b")
        assert info.value.kind is NotFoundKind.EDGE

    def test_delete_edges_for_item(self, backend: Backend) -> None:
        for a, b in [("a", "b"), ("b", "c"), ("c", "d")]:
            backend.edges.insert_edge(DependencyEdge(a, b, "spec-1"))
        assert backend.edges.delete_edges_for_item("b") == 2
        assert _keys(backend.edges.list_edges("spec-1")) == [("c", "d")]
        assert backend.edges.delete_edges_for_item("b") == 0


class TestItems:
    def test_lookup(self, backend: Backend) -> None:
        item = backend.items.get_item("a")
        assert item is not None
        assert item.spec_id == "spec-1"
        assert backend.items.get_item("nope") is None

    def test_items_for_spec(self, backend: Backend) -> None:
        ids = sorted(i.id for i in backend.items.get_items_for_spec("spec-2"))
        assert ids == ["y", "z"]

    def test_removing_item_cascades_to_edges(self, backend: Backend) -> None:
        backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        backend.edges.insert_edge(DependencyEdge("c", "a", "spec-1"))
        backend.edges.insert_edge(DependencyEdge("c", "d", "spec-1"))
        backend.items.remove_item("a")
        assert _keys(backend.edges.list_edges("spec-1")) == [("c", "d")]
        assert backend.edges.get_edge("a", "b") is None

    def test_remove_missing_item(self, backend: Backend) -> None:
        with pytest.raises(NotFoundError) as info:
            backend.items.remove_item("nope")
        assert info.value.kind is NotFoundKind.ITEM

    def test_add_item_replaces(self, backend: Backend) -> None:
        backend.items.add_item(make_item("a", size="XL"))
        item = backend.items.get_item("a")
        assert item.size_estimate is not None
        assert item.size_estimate.value == "XL"


class TestEndpoints:
    @pytest.mark.parametrize("src, dst, missing", [("a", "ghost", "ghost"), ("ghost", "a", "ghost")])
    def test_unknown_endpoint_named(self, backend: Backend, src, dst, missing) -> None:
        with pytest.raises(NotFoundError) as info:
            backend.edges.insert_edge(DependencyEdge(src, dst, "spec-1"))
        assert info.value.kind is NotFoundKind.ITEM
        assert info.value.ids == (missing,)
        assert str(info.value) == f"Work item not found: {missing}"

    def test_deleted_endpoint_refused(self, backend: Backend) -> None:
        backend.items.remove_item("b")
        with pytest.raises(NotFoundError):
            backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        assert backend.edges.list_edges("spec-1") == []


class TestInsertChecked:
    def test_check_sees_current_state(self, backend: Backend) -> None:
        backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        seen = {}

        def check(items, edges):
            seen["items"] = sorted(i.id for i in items)
            seen["edges"] = [e.key for e in edges]

        backend.edges.insert_edge_checked(
            DependencyEdge("b", "c", "spec-1"), backend.items, check
        )
        assert seen == {"items": ["a", "b", "c", "d"], "edges": [("a", "b")]}
        assert _keys(backend.edges.list_edges("spec-1")) == [("a", "b"), ("b", "c")]

    def test_veto_leaves_store_unchanged(self, backend: Backend) -> None:
        def veto(items, edges):
            raise CycleError("c", "a", ["c", "a", "c"])

        with pytest.raises(CycleError):
            backend.edges.insert_edge_checked(
                DependencyEdge("c", "a", "spec-1"), backend.items, veto
            )
        assert backend.edges.get_edge("c", "a") is None

    def test_duplicate_after_check(self, backend: Backend) -> None:
        backend.edges.insert_edge(DependencyEdge("a", "b", "spec-1"))
        with pytest.raises(DuplicateEdgeError):
            backend.edges.insert_edge_checked(
                DependencyEdge("a", "b", "spec-1"), backend.items, lambda items, edges: None
            )
