"""Shared fixtures and builders for graph algorithm tests.

Edges are written the way the engine stores them: ("A", "B") means
A depends on B, so B has to finish first.
"""
from __future__ import annotations

from typing import Iterable

import pytest

from workgraph.domain.edge import DependencyEdge
from workgraph.domain.work_item import WorkItemNode
from workgraph.graph.snapshot import GraphSnapshot

SPEC = "spec-1"


def make_item(item_id: str, size: str | None = None, spec_id: str = SPEC) -> WorkItemNode:
    return WorkItemNode.create(id=item_id, spec_id=spec_id, title=item_id, size_estimate=size)


def build(
    pairs: Iterable[tuple[str, str]],
    sizes: dict[str, str | None] | None = None,
    nodes: Iterable[str] = (),
    spec_id: str = SPEC,
) -> GraphSnapshot:
    """Snapshot over *pairs*; every endpoint and every id in *nodes* becomes an item."""
    pairs = list(pairs)
    sizes = sizes or {}
    ids = set(nodes) | set(sizes) | {i for pair in pairs for i in pair}
    items = [make_item(i, sizes.get(i), spec_id) for i in ids]
    edges = [DependencyEdge(a, b, spec_id) for a, b in pairs]
    return GraphSnapshot.build(spec_id, items, edges)


def ids(snapshot: GraphSnapshot, indices: Iterable[int]) -> list[str]:
    return [snapshot.id_of(i) for i in indices]


@pytest.fixture
def empty_snapshot() -> GraphSnapshot:
    return GraphSnapshot.build(SPEC, [], [])


@pytest.fixture
def chain_snapshot() -> GraphSnapshot:
    """A -> B -> C: A(S) depends on B(M) depends on C(L)."""
    return build([("A", "B"), ("B", "C")], sizes={"A": "S", "B": "M", "C": "L"})


@pytest.fixture
def diamond_snapshot() -> GraphSnapshot:
    """
    D depends on B and C, both depend on A.

        D -> B -> A
        D -> C -> A
    """
    return build([("D", "B"), ("D", "C"), ("B", "A"), ("C", "A")])


@pytest.fixture
def corrupt_snapshot() -> GraphSnapshot:
    """3-cycle X -> Y -> Z -> X next to a valid chain A(S) -> B(M)."""
    return build(
        [("X", "Y"), ("Y", "Z"), ("Z", "X"), ("A", "B")],
        sizes={"A": "S", "B": "M", "X": "XL", "Y": "XL", "Z": "XL"},
    )
