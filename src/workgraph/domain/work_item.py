"""WorkItemNode -- the read-only projection of a work item.

The work-item store owns epics, features and stories with many more
fields (descriptions, acceptance criteria, template fields).  The
dependency engine only needs the handful below, so that is all it
models.  Instances are frozen: the engine never writes a work item.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from workgraph.domain.types import SpecId, WorkItemId


class WorkItemType(Enum):
    EPIC = "epic"
    FEATURE = "feature"
    STORY = "story"


class SizeEstimate(Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"

    @classmethod
    def parse(cls, raw: str | SizeEstimate | None) -> SizeEstimate | None:
        """Accept an enum, a size code, or None/"" for unestimated."""
        if raw is None or isinstance(raw, SizeEstimate):
            return raw
        code = raw.strip().upper()
        if not code:
            return None
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown size estimate: {raw!r}") from None


@dataclass(frozen=True, slots=True)
class WorkItemNode:
    """Minimal typed view of a work item."""
    id: WorkItemId
    title: str
    type: WorkItemType
    size_estimate: SizeEstimate | None
    status: str
    spec_id: SpecId

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Work item id must be non-empty")
        if not self.spec_id:
            raise ValueError(f"Work item {self.id!r} has no spec_id")

    @classmethod
    def create(
        cls,
        id: WorkItemId,
        spec_id: SpecId,
        title: str = "",
        type: WorkItemType | str = WorkItemType.STORY,
        size_estimate: SizeEstimate | str | None = None,
        status: str = "draft",
    ) -> WorkItemNode:
        """Factory that also accepts the string forms used on the wire."""
        return cls(
            id=id,
            title=title,
            type=WorkItemType(type) if isinstance(type, str) else type,
            size_estimate=SizeEstimate.parse(size_estimate),
            status=status,
            spec_id=spec_id,
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> WorkItemNode:
        """Build from a camelCase or snake_case mapping (JSON import, DB row)."""
        size = record.get("sizeEstimate", record.get("size_estimate"))
        return cls.create(
            id=record["id"],
            spec_id=record.get("specId", record.get("spec_id", "")),
            title=record.get("title", ""),
            type=record.get("type", WorkItemType.STORY.value),
            size_estimate=size,
            status=record.get("status", "draft"),
        )
