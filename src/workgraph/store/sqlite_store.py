"""SQLite storage for work items and their dependency edges.

Schema:
  work_items              -- the read-only projection the engine needs
  work_item_dependencies  -- one row per edge
      primary key (from_id, to_id)          uniqueness, second line of defense
      check (from_id <> to_id)              no self-dependency
      foreign keys ... on delete cascade    deleting an item drops its edges

list_edges joins both endpoints back to work_items with a matching
spec_id, so it can't return a dangling or cross-spec edge even if one
slipped in.

insert_edge_checked re-reads the spec and runs the caller's check in the
same ``begin immediate`` transaction as the insert.  Every process that
writes the file goes through that write lock, so two CLI invocations
can't each pass the cycle check and then both commit.

Each call opens its own connection (file databases only; ":memory:"
would give every call a fresh empty database).  Busy/locked errors are
retried a bounded number of times, then surface as StoreError.
"""
from __future__ import annotations

import logging
import sqlite3
import time
from contextlib import closing
from datetime import datetime
from pathlib import Path
from typing import Callable, TypeVar

from workgraph.domain.edge import DependencyEdge
from workgraph.domain.errors import (
    DuplicateEdgeError,
    NotFoundError,
    NotFoundKind,
    StoreError,
    ValidationError,
    ValidationReason,
)
from workgraph.domain.types import SpecId, WorkItemId
from workgraph.domain.work_item import WorkItemNode
from workgraph.store.base import DependencyStoreBase, EdgeCheck, WorkItemLookup

log = logging.getLogger(__name__)

R = TypeVar("R")

_SCHEMA = """
create table if not exists work_items (
    id text primary key,
    spec_id text not null,
    title text not null default '',
    type text not null,
    size_estimate text,
    status text not null default 'draft'
);
create index if not exists work_items_spec_id_idx on work_items (spec_id);

create table if not exists work_item_dependencies (
    from_id text not null references work_items (id) on delete cascade,
    to_id text not null references work_items (id) on delete cascade,
    spec_id text not null,
    created_at text not null,
    primary key (from_id, to_id),
    check (from_id <> to_id)
);
create index if not exists work_item_dependencies_spec_id_idx
    on work_item_dependencies (spec_id);
create index if not exists work_item_dependencies_to_id_idx
    on work_item_dependencies (to_id);
"""

# both endpoints must still exist and belong to the edge's spec
_LIST_EDGES = """
select d.from_id, d.to_id, d.spec_id, d.created_at
from work_item_dependencies d
join work_items f on f.id = d.from_id and f.spec_id = d.spec_id
join work_items t on t.id = d.to_id and t.spec_id = d.spec_id
where d.spec_id = ?
order by d.from_id, d.to_id
"""


class SqliteStore(DependencyStoreBase, WorkItemLookup):
    """Relational store backing both the edge table and the item lookup.

    Args:
        path: database file; parent directories are created.
        max_retries: extra attempts after a busy/locked error.
        retry_delay: seconds to sleep between attempts.
        timeout: sqlite3 busy timeout per connection, in seconds.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        max_retries: int = 3,
        retry_delay: float = 0.05,
        timeout: float = 5.0,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._path = Path(path)
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._run(lambda conn: conn.executescript(_SCHEMA))

    @property
    def path(self) -> Path:
        return self._path

    # ---- plumbing --------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("pragma foreign_keys = on")
        return conn

    def _run(self, op: Callable[[sqlite3.Connection], R]) -> R:
        """Run *op* in one transaction, retrying transient lock errors."""
        attempt = 0
        while True:
            try:
                with closing(self._connect()) as conn:
                    with conn:
                        return op(conn)
            except sqlite3.IntegrityError:
                raise
            except sqlite3.OperationalError as exc:
                msg = str(exc).lower()
                if ("locked" not in msg and "busy" not in msg) or attempt >= self._max_retries:
                    raise StoreError(f"SQLite operation failed: {exc}") from exc
                attempt += 1
                log.warning(
                    "SQLite busy (%s), retry %d/%d", exc, attempt, self._max_retries
                )
                time.sleep(self._retry_delay)
            except sqlite3.DatabaseError as exc:
                raise StoreError(f"SQLite operation failed: {exc}") from exc

    @staticmethod
    def _edge_from_row(row: sqlite3.Row) -> DependencyEdge:
        return DependencyEdge(
            from_id=row["from_id"],
            to_id=row["to_id"],
            spec_id=row["spec_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _item_from_row(row: sqlite3.Row) -> WorkItemNode:
        return WorkItemNode.create(
            id=row["id"],
            spec_id=row["spec_id"],
            title=row["title"],
            type=row["type"],
            size_estimate=row["size_estimate"],
            status=row["status"],
        )

    # ---- work items ------------------------------------------------------

    def add_item(self, item: WorkItemNode) -> None:
        """Insert or update an item.  Updating keeps its edges."""
        size = item.size_estimate.value if item.size_estimate else None
        self._run(lambda conn: conn.execute(
            """
            insert into work_items (id, spec_id, title, type, size_estimate, status)
            values (?, ?, ?, ?, ?, ?)
            on conflict(id) do update set
                spec_id = excluded.spec_id,
                title = excluded.title,
                type = excluded.type,
                size_estimate = excluded.size_estimate,
                status = excluded.status
            """,
            (item.id, item.spec_id, item.title, item.type.value, size, item.status),
        ))

    def remove_item(self, item_id: WorkItemId) -> None:
        """Delete an item; its edges go with it (on delete cascade)."""
        cur = self._run(lambda conn: conn.execute(
            "delete from work_items where id = ?", (item_id,)
        ))
        if cur.rowcount == 0:
            raise NotFoundError(NotFoundKind.ITEM, item_id)

    def get_item(self, item_id: WorkItemId) -> WorkItemNode | None:
        row = self._run(lambda conn: conn.execute(
            "select * from work_items where id = ?", (item_id,)
        ).fetchone())
        return self._item_from_row(row) if row else None

    def get_items_for_spec(self, spec_id: SpecId) -> list[WorkItemNode]:
        rows = self._run(lambda conn: conn.execute(
            "select * from work_items where spec_id = ? order by id", (spec_id,)
        ).fetchall())
        return [self._item_from_row(r) for r in rows]

    # ---- edges -----------------------------------------------------------

    def list_edges(self, spec_id: SpecId) -> list[DependencyEdge]:
        rows = self._run(lambda conn: conn.execute(_LIST_EDGES, (spec_id,)).fetchall())
        return [self._edge_from_row(r) for r in rows]

    def get_edge(self, from_id: WorkItemId, to_id: WorkItemId) -> DependencyEdge | None:
        row = self._run(lambda conn: conn.execute(
            """
            select from_id, to_id, spec_id, created_at
            from work_item_dependencies where from_id = ? and to_id = ?
            """,
            (from_id, to_id),
        ).fetchone())
        return self._edge_from_row(row) if row else None

    def insert_edge(self, edge: DependencyEdge) -> None:
        try:
            self._run(lambda conn: self._insert(conn, edge))
        except sqlite3.IntegrityError as exc:
            raise self._integrity_error(edge, exc) from exc

    def insert_edge_checked(
        self, edge: DependencyEdge, items: WorkItemLookup, check: EdgeCheck
    ) -> None:
        """Re-read, check and insert inside one ``begin immediate`` transaction.

        ``begin immediate`` takes the database write lock before the read,
        so a writer in another process can't slip an edge in between the
        check and the insert.  Items are read from this database, which
        the foreign keys already tie the edges to; *items* is unused.
        """
        def _checked(conn: sqlite3.Connection) -> None:
            conn.execute("begin immediate")
            item_rows = conn.execute(
                "select * from work_items where spec_id = ? order by id", (edge.spec_id,)
            ).fetchall()
            edge_rows = conn.execute(_LIST_EDGES, (edge.spec_id,)).fetchall()
            check(
                [self._item_from_row(r) for r in item_rows],
                [self._edge_from_row(r) for r in edge_rows],
            )
            self._insert(conn, edge)

        try:
            self._run(_checked)
        except sqlite3.IntegrityError as exc:
            raise self._integrity_error(edge, exc) from exc

    @staticmethod
    def _insert(conn: sqlite3.Connection, edge: DependencyEdge) -> None:
        conn.execute(
            """
            insert into work_item_dependencies (from_id, to_id, spec_id, created_at)
            values (?, ?, ?, ?)
            """,
            (edge.from_id, edge.to_id, edge.spec_id, edge.created_at.isoformat()),
        )

    def _integrity_error(self, edge: DependencyEdge, exc: sqlite3.IntegrityError) -> Exception:
        """Translate a constraint failure on insert into an engine error."""
        msg = str(exc).lower()
        if "unique" in msg or "primary key" in msg:
            return DuplicateEdgeError(edge.from_id, edge.to_id)
        if "foreign key" in msg:
            # sqlite doesn't say which reference failed
            missing = edge.from_id if self.get_item(edge.from_id) is None else edge.to_id
            return NotFoundError(NotFoundKind.ITEM, missing)
        if "check" in msg:
            return ValidationError(ValidationReason.SELF_DEPENDENCY, edge.from_id, edge.to_id)
        return StoreError(f"SQLite integrity error: {exc}")

    def delete_edge(self, from_id: WorkItemId, to_id: WorkItemId) -> DependencyEdge:
        def _delete(conn: sqlite3.Connection) -> DependencyEdge | None:
            row = conn.execute(
                """
                select from_id, to_id, spec_id, created_at
                from work_item_dependencies where from_id = ? and to_id = ?
                """,
                (from_id, to_id),
            ).fetchone()
            if row is None:
                return None
            conn.execute(
                "delete from work_item_dependencies where from_id = ? and to_id = ?",
                (from_id, to_id),
            )
            return self._edge_from_row(row)

        edge = self._run(_delete)
        if edge is None:
            raise NotFoundError(NotFoundKind.EDGE, from_id, to_id)
        return edge

    def delete_edges_for_item(self, item_id: WorkItemId) -> int:
        cur = self._run(lambda conn: conn.execute(
            "delete from work_item_dependencies where from_id = ? or to_id = ?",
            (item_id, item_id),
        ))
        return cur.rowcount
