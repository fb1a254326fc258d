"""Critical path analysis over a dependency snapshot.

The critical path is the heaviest chain of dependent work, weighted by
each item's effort estimate.  It bounds how soon the last item in the
spec can possibly finish, and it is what the graph view highlights.

Algorithm:
  1.  Kahn's algorithm orders every node it can (see topological.py).
  2.  If anything is left over, Tarjan's SCC pass over the leftovers
      reports the cycles.  Leftover nodes get no score.
  3.  Walk the ordered nodes prerequisites-first.  For each node v:
          dist[v] = weight[v] + max(dist[p] for each scored prerequisite p)
      remembering which p gave the max.
  4.  The node with the largest dist ends the path; follow the
      remembered prerequisites back to reconstruct it.

Weight sits on the prerequisite side of every edge: a node's weight is
the cost of finishing it before its dependents can start, so a chain's
length is just the sum of its node weights.

Ties always go to the smallest id, both when choosing a node's best
prerequisite and when choosing the terminal node.  Because snapshot
indices follow id order that is just "smallest index wins", and
repeated runs on the same graph produce the same path and flags.

O(V + E) overall.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from workgraph.domain.types import EdgeKey, WorkItemId
from workgraph.domain.weights import DEFAULT_WEIGHTS, WeightScheme
from workgraph.graph.scc import find_cycles
from workgraph.graph.snapshot import GraphSnapshot
from workgraph.graph.topological import kahn_order


@dataclass(slots=True)
class CriticalPathResult:
    """Result of critical path analysis."""
    path: list[WorkItemId]                 # source (first to finish) -> sink
    total_weight: float
    critical_edges: frozenset[EdgeKey]     # (from_id, to_id) pairs on the path
    cycles: list[list[WorkItemId]] = field(default_factory=list)
    bottleneck: WorkItemId | None = None   # heaviest node on the path
    bottleneck_weight: float = 0.0

    def is_critical(self, from_id: WorkItemId, to_id: WorkItemId) -> bool:
        return (from_id, to_id) in self.critical_edges

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)


def analyze(
    snapshot: GraphSnapshot, weights: WeightScheme = DEFAULT_WEIGHTS
) -> CriticalPathResult:
    """Compute the critical path and residual cycles of *snapshot*."""
    kahn = kahn_order(snapshot)
    cycles = find_cycles(snapshot, kahn.residual) if kahn.residual else []

    w = [weights.node_weight(n) for n in snapshot.nodes]
    scored = set(kahn.order)
    dist: dict[int, float] = {}
    pred: dict[int, int | None] = {}

    # Kahn emits dependents first; reverse it so prerequisites come first
    for node in reversed(kahn.order):
        best_pre: int | None = None
        best = 0.0
        for pre in snapshot.successors(node):
            if pre not in scored:
                continue
            d = dist[pre]
            if best_pre is None or d > best or (d == best and pre < best_pre):
                best = d
                best_pre = pre
        dist[node] = w[node] + best
        pred[node] = best_pre

    if not dist:
        return CriticalPathResult(
            path=[], total_weight=0.0, critical_edges=frozenset(), cycles=cycles,
        )

    # smallest index wins ties, so scan in index order with strict >
    end = min(dist)
    for node in sorted(dist):
        if dist[node] > dist[end]:
            end = node

    # walk back from the sink toward the source
    chain = [end]
    cur = pred[end]
    while cur is not None:
        chain.append(cur)
        cur = pred[cur]
    chain.reverse()

    path = [snapshot.id_of(i) for i in chain]
    critical = frozenset(
        (path[i + 1], path[i]) for i in range(len(path) - 1)
    )

    bn = min(chain, key=lambda i: (-w[i], i))

    return CriticalPathResult(
        path=path,
        total_weight=dist[end],
        critical_edges=critical,
        cycles=cycles,
        bottleneck=snapshot.id_of(bn),
        bottleneck_weight=w[bn],
    )
