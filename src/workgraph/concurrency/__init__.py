"""Concurrency control for the dependency engine.

  - SpecLockTable: one mutex per spec id, for check-then-insert writes
  - GraphCache: TTL cache of computed graphs with race-safe invalidation
"""
from workgraph.concurrency.graph_cache import GraphCache
from workgraph.concurrency.spec_locks import SpecLockTable

__all__ = [
    "GraphCache",
    "SpecLockTable",
]
