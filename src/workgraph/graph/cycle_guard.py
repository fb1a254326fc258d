"""Pre-insert validation for a candidate dependency edge.

Adding from -> to closes a cycle exactly when ``from`` is already
reachable from ``to`` along existing depends-on edges (``to`` already,
transitively, depends on ``from``).  So the check is one BFS starting
at ``to``; if it visits ``from`` the edge is rejected.  O(V + E), which
for one spec's worth of items is cheap enough to run on every write.

The cheaper structural checks run first, each with its own error:
  1. self-dependency
  2. cross-spec
  3. duplicate
  4. reachability (the BFS)
"""
from __future__ import annotations

from collections import deque
from typing import Iterable

from workgraph.domain.errors import CycleError, ValidationError, ValidationReason
from workgraph.domain.types import WorkItemId
from workgraph.domain.work_item import WorkItemNode
from workgraph.graph.snapshot import GraphSnapshot


def find_path(
    snapshot: GraphSnapshot, start: WorkItemId, goal: WorkItemId
) -> list[WorkItemId] | None:
    """Shortest depends-on path start -> ... -> goal, or None.

    Returns [start] when start == goal and start is in the snapshot.
    """
    src = snapshot.index_of(start)
    dst = snapshot.index_of(goal)
    if src is None or dst is None:
        return None

    parent: dict[int, int | None] = {src: None}
    q: deque[int] = deque([src])
    while q:
        node = q.popleft()
        if node == dst:
            path: list[WorkItemId] = []
            cur: int | None = node
            while cur is not None:
                path.append(snapshot.id_of(cur))
                cur = parent[cur]
            path.reverse()
            return path
        for succ in snapshot.successors(node):
            if succ not in parent:
                parent[succ] = node
                q.append(succ)
    return None


def would_create_cycle(
    snapshot: GraphSnapshot, from_id: WorkItemId, to_id: WorkItemId
) -> bool:
    """True if adding from_id -> to_id would make the graph cyclic."""
    if from_id == to_id:
        return True
    return find_path(snapshot, to_id, from_id) is not None


def would_create_cycle_in(
    edges: Iterable[tuple[WorkItemId, WorkItemId]],
    from_id: WorkItemId,
    to_id: WorkItemId,
) -> bool:
    """Same question over a bare (from, to) edge list."""
    return would_create_cycle(GraphSnapshot.from_pairs(edges), from_id, to_id)


def check_edge(
    snapshot: GraphSnapshot, from_item: WorkItemNode, to_item: WorkItemNode
) -> None:
    """Raise if from_item -> to_item may not be added to *snapshot*.

    Raises:
        ValidationError: SELF_DEPENDENCY, CROSS_SPEC or DUPLICATE
        CycleError: the edge would close a cycle
    """
    from_id, to_id = from_item.id, to_item.id

    if from_id == to_id:
        raise ValidationError(ValidationReason.SELF_DEPENDENCY, from_id, to_id)

    if (
        from_item.spec_id != to_item.spec_id
        or from_item.spec_id != snapshot.spec_id
        or from_id not in snapshot
        or to_id not in snapshot
    ):
        raise ValidationError(ValidationReason.CROSS_SPEC, from_id, to_id)

    if snapshot.has_edge(from_id, to_id):
        raise ValidationError(ValidationReason.DUPLICATE, from_id, to_id)

    back = find_path(snapshot, to_id, from_id)
    if back is not None:
        # back is [to, ..., from]; the new edge closes it into a loop
        raise CycleError(from_id, to_id, [from_id] + back)
