"""Dependency edge stores and work-item lookups.

Both an in-memory and a SQLite implementation sit behind the same
interfaces, so the service and its tests don't care which one they get.
"""
from workgraph.store.base import DependencyStoreBase, WorkItemLookup
from workgraph.store.memory_store import InMemoryDependencyStore, InMemoryWorkItemStore
from workgraph.store.sqlite_store import SqliteStore

__all__ = [
    "DependencyStoreBase",
    "InMemoryDependencyStore",
    "InMemoryWorkItemStore",
    "SqliteStore",
    "WorkItemLookup",
]
