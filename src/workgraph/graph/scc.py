"""Strongly connected components via Tarjan's algorithm.

Used only for diagnostics: when Kahn's algorithm leaves a residual, the
residual subgraph is handed here and every non-trivial component
(two or more nodes, or one node with a self-loop) is reported as a
cycle.  Persisted data should never contain one; seeing any means the
edges were written without the guard (an import, a manual fix-up).

The DFS is iterative with an explicit stack of (node, next-successor
position) frames, so deep chains can't hit the recursion limit.

Per node we track:
  index    -- DFS discovery number
  lowlink  -- smallest index reachable from the node's DFS subtree
              through at most one back edge into the current stack
A node whose lowlink equals its own index is the root of a component;
popping the Tarjan stack down to it yields that component.
"""
from __future__ import annotations

from typing import Iterable

from workgraph.domain.types import WorkItemId
from workgraph.graph.snapshot import GraphSnapshot


def strongly_connected_components(
    snapshot: GraphSnapshot,
    restrict_to: Iterable[int] | None = None,
) -> list[list[int]]:
    """Return every SCC of *snapshot*, optionally within a node subset.

    Edges leaving the subset are ignored.  Components come back in
    Tarjan's emission order (reverse topological order of the
    condensation), each as a sorted list of indices.
    """
    if restrict_to is None:
        allowed = set(range(snapshot.node_count))
    else:
        allowed = set(restrict_to)

    index: dict[int, int] = {}
    lowlink: dict[int, int] = {}
    on_stack: set[int] = set()
    stack: list[int] = []
    components: list[list[int]] = []
    counter = 0

    for root in sorted(allowed):
        if root in index:
            continue
        index[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work: list[tuple[int, int]] = [(root, 0)]

        while work:
            node, pos = work[-1]
            succs = snapshot.successors(node)
            if pos < len(succs):
                work[-1] = (node, pos + 1)
                succ = succs[pos]
                if succ not in allowed:
                    continue
                if succ not in index:
                    index[succ] = lowlink[succ] = counter
                    counter += 1
                    stack.append(succ)
                    on_stack.add(succ)
                    work.append((succ, 0))
                elif succ in on_stack:
                    lowlink[node] = min(lowlink[node], index[succ])
                continue

            # all successors explored
            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])
            if lowlink[node] == index[node]:
                comp: list[int] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    comp.append(member)
                    if member == node:
                        break
                comp.sort()
                components.append(comp)

    return components


def find_cycles(
    snapshot: GraphSnapshot,
    restrict_to: Iterable[int] | None = None,
) -> list[list[WorkItemId]]:
    """Non-trivial SCCs as sorted id lists, ordered by their first id."""
    cycles: list[list[WorkItemId]] = []
    for comp in strongly_connected_components(snapshot, restrict_to):
        if len(comp) == 1:
            only = comp[0]
            if only not in snapshot.successors(only):
                continue
        cycles.append([snapshot.id_of(i) for i in comp])
    cycles.sort(key=lambda ids: ids[0])
    return cycles
