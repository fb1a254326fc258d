"""Shared type aliases used across the domain."""
from __future__ import annotations

from typing import TypeAlias

WorkItemId: TypeAlias = str
SpecId: TypeAlias = str
EdgeKey: TypeAlias = tuple[str, str]  # (from_id, to_id)
