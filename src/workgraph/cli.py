"""workgraph CLI entry point.

Usage: workgraph [-v] <command> --db PATH ...

    import FILE                       load items + dependencies from JSON
    graph SPEC_ID [--unweighted]      print the dependency graph
    add ITEM_ID DEPENDS_ON_ID         add a dependency (cycle-checked)
    remove ITEM_ID DEPENDS_ON_ID      remove a dependency

The import file looks like:
    {"items": [{"id", "specId", "title", "type", "sizeEstimate", "status"}],
     "dependencies": [{"from": "...", "to": "..."}]}

Imported dependencies are written as-is, without the cycle check, the
same way externally imported data reaches the store.  `graph` will
report any cycles that brings in.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from workgraph.api.routes import ApiResponse, GraphRoutes
from workgraph.domain.edge import DependencyEdge
from workgraph.domain.errors import (
    DependencyError,
    DuplicateEdgeError,
    NotFoundError,
    ValidationError,
)
from workgraph.domain.weights import DEFAULT_WEIGHTS, UNWEIGHTED
from workgraph.domain.work_item import WorkItemNode
from workgraph.service.graph_service import GraphService
from workgraph.store.sqlite_store import SqliteStore

log = logging.getLogger(__name__)


def _add_db_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--db", type=Path, default=Path("workgraph.db"),
        help="SQLite database file (default: workgraph.db)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workgraph",
        description="Work-item dependency graphs: cycle-safe edits and critical paths.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command")

    p = subparsers.add_parser("import", help="Load work items and dependencies from JSON.")
    _add_db_arg(p)
    p.add_argument("file", type=Path, help="JSON file with 'items' and 'dependencies'")

    p = subparsers.add_parser("graph", help="Print the dependency graph of a spec.")
    _add_db_arg(p)
    p.add_argument("spec_id")
    p.add_argument(
        "--unweighted", action="store_true",
        help="Ignore size estimates; longest path by item count.",
    )

    for name, help_text in (
        ("add", "Add a dependency: ITEM_ID depends on DEPENDS_ON_ID."),
        ("remove", "Remove the dependency ITEM_ID -> DEPENDS_ON_ID."),
    ):
        p = subparsers.add_parser(name, help=help_text)
        _add_db_arg(p)
        p.add_argument("item_id")
        p.add_argument("depends_on_id")

    return parser


def _run_import(args: argparse.Namespace, store: SqliteStore) -> int:
    doc = json.loads(args.file.read_text(encoding="utf-8"))
    items = [WorkItemNode.from_record(rec) for rec in doc.get("items", [])]
    for item in items:
        store.add_item(item)

    spec_of = {item.id: item.spec_id for item in items}
    added = 0
    for dep in doc.get("dependencies", []):
        src, dst = dep["from"], dep["to"]
        spec_id = spec_of.get(src)
        if spec_id is None:
            existing = store.get_item(src)
            if existing is None:
                log.warning("Skipping dependency %s -> %s: unknown item %s", src, dst, src)
                continue
            spec_id = existing.spec_id
        try:
            store.insert_edge(DependencyEdge(from_id=src, to_id=dst, spec_id=spec_id))
        except (DuplicateEdgeError, NotFoundError, ValidationError) as exc:
            log.warning("Skipping dependency %s -> %s: %s", src, dst, exc)
            continue
        added += 1

    print(f"Imported {len(items)} item(s), {added} dependency(ies) into {store.path}")
    return 0


def _emit(resp: ApiResponse) -> int:
    if resp.body is not None:
        out = sys.stdout if resp.status < 400 else sys.stderr
        print(json.dumps(resp.body, indent=2), file=out)
    return 0 if resp.status < 400 else 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        store = SqliteStore(args.db)
        if args.command == "import":
            return _run_import(args, store)

        weights = UNWEIGHTED if getattr(args, "unweighted", False) else DEFAULT_WEIGHTS
        routes = GraphRoutes(GraphService(store, store, weights=weights))

        if args.command == "graph":
            return _emit(routes.get_graph(args.spec_id))
        if args.command == "add":
            return _emit(routes.add_dependency(args.item_id, {"dependsOnId": args.depends_on_id}))
        if args.command == "remove":
            return _emit(routes.remove_dependency(args.item_id, args.depends_on_id))
    except (DependencyError, OSError, ValueError, KeyError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 2
