"""DependencyEdge -- one "from depends on to" relation.

from_id is the dependent item (it is blocked), to_id is the
prerequisite (it blocks).  spec_id is denormalized onto the edge so the
store can scope queries and the guard can reject cross-spec edges
without another lookup.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from workgraph.domain.types import EdgeKey, SpecId, WorkItemId


@dataclass(frozen=True, slots=True)
class DependencyEdge:
    from_id: WorkItemId
    to_id: WorkItemId
    spec_id: SpecId
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def key(self) -> EdgeKey:
        return (self.from_id, self.to_id)

    @property
    def is_self_loop(self) -> bool:
        return self.from_id == self.to_id
