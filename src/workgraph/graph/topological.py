"""Topological ordering via Kahn's algorithm (BFS with in-degree tracking).

In-degree here counts the edges where a node is the ``to`` end, i.e.
how many items depend on it.  Peeling zero in-degree nodes therefore
starts from the items nothing waits on and works back toward the
foundational prerequisites; callers that want prerequisites first walk
the order in reverse.

Unlike a strict topological sort this never raises on a cycle.  Nodes
the algorithm cannot remove are returned as the residual set: every
node on a cycle, plus every prerequisite a cycle member transitively
depends on (those keep a dependent that is never removed).  The
critical path analyzer hands the residual to the SCC pass for
diagnostics and scores the rest.

The algorithm:
  1.  Compute in-degree for every node.
  2.  Seed a FIFO queue with all zero in-degree nodes, in index (id) order.
  3.  Pop a node, append it to the order, decrement the in-degree of
      each node it points at.  Any that reach 0 join the queue.
  4.  Whatever was never popped is the residual.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass

from workgraph.graph.snapshot import GraphSnapshot


@dataclass(slots=True)
class KahnResult:
    """Outcome of one Kahn pass over a snapshot (indices, not ids)."""
    order: list[int]
    residual: list[int]

    @property
    def is_dag(self) -> bool:
        return not self.residual


def kahn_order(snapshot: GraphSnapshot) -> KahnResult:
    """Order the removable nodes of *snapshot*; report the rest."""
    in_deg = [snapshot.in_degree(i) for i in range(snapshot.node_count)]

    q: deque[int] = deque(i for i, deg in enumerate(in_deg) if deg == 0)

    order: list[int] = []
    while q:
        node = q.popleft()
        order.append(node)
        for succ in snapshot.successors(node):
            in_deg[succ] -= 1
            if in_deg[succ] == 0:
                q.append(succ)

    if len(order) == snapshot.node_count:
        return KahnResult(order=order, residual=[])

    removed = set(order)
    residual = [i for i in range(snapshot.node_count) if i not in removed]
    return KahnResult(order=order, residual=residual)
