"""Effort weights used for critical path scoring.

A node's weight is the cost of finishing it before anything that
depends on it can start.  The default scheme follows the usual
Fibonacci-ish story point scale.  Unestimated items get a small fixed
weight so they still lengthen a chain without dominating it.

UNWEIGHTED gives every node the same weight, which makes the critical
path the chain with the most items (longest path by edge count).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from workgraph.domain.work_item import SizeEstimate, WorkItemNode

_SIZE_ORDER = (SizeEstimate.XS, SizeEstimate.S, SizeEstimate.M, SizeEstimate.L, SizeEstimate.XL)


@dataclass(frozen=True, slots=True)
class WeightScheme:
    """Mapping from size estimate to effort weight.

    Validated on construction: every size must be present, every weight
    positive, and the mapping must not decrease as sizes grow.
    """
    sizes: Mapping[SizeEstimate, float]
    unestimated: float = 1.0
    name: str = field(default="custom", compare=False)

    def __post_init__(self) -> None:
        missing = [s.value for s in _SIZE_ORDER if s not in self.sizes]
        if missing:
            raise ValueError(f"Weight scheme is missing sizes: {', '.join(missing)}")
        if self.unestimated <= 0 or any(self.sizes[s] <= 0 for s in _SIZE_ORDER):
            raise ValueError("All weights must be positive")
        ordered = [self.sizes[s] for s in _SIZE_ORDER]
        if any(a > b for a, b in zip(ordered, ordered[1:])):
            raise ValueError("Weights must not decrease from XS to XL")
        # freeze a private copy so callers can't mutate it afterwards
        object.__setattr__(self, "sizes", MappingProxyType(dict(self.sizes)))

    def weight_of(self, size: SizeEstimate | None) -> float:
        if size is None:
            return self.unestimated
        return self.sizes[size]

    def node_weight(self, node: WorkItemNode) -> float:
        return self.weight_of(node.size_estimate)


DEFAULT_WEIGHTS = WeightScheme(
    sizes={
        SizeEstimate.XS: 1.0,
        SizeEstimate.S: 2.0,
        SizeEstimate.M: 3.0,
        SizeEstimate.L: 5.0,
        SizeEstimate.XL: 8.0,
    },
    unestimated=1.0,
    name="size",
)

UNWEIGHTED = WeightScheme(
    sizes={s: 1.0 for s in _SIZE_ORDER},
    unestimated=1.0,
    name="unweighted",
)
