"""End-to-end tests for the workgraph command line."""
from __future__ import annotations

import json

import pytest

from workgraph.cli import main

DOC = {
    "items": [
        {"id": "A", "specId": "spec-1", "title": "Auth", "sizeEstimate": "S"},
        {"id": "B", "specId": "spec-1", "title": "Billing", "sizeEstimate": "M"},
        {"id": "C", "specId": "spec-1", "title": "Checkout", "sizeEstimate": "L"},
        {"id": "Z", "specId": "spec-2", "title": "Elsewhere"},
    ],
    "dependencies": [
        {"from": "A", "to": "B"},
        {"from": "B", "to": "C"},
        {"from": "A", "to": "B"},
        {"from": "A", "to": "ghost"},
        {"from": "nobody", "to": "A"},
    ],
}


@pytest.fixture
def db(tmp_path, capsys):
    path = tmp_path / "wg.db"
    src = tmp_path / "import.json"
    src.write_text(json.dumps(DOC), encoding="utf-8")
    assert main(["import", "--db", str(path), str(src)]) == 0
    capsys.readouterr()
    return path


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage: workgraph" in capsys.readouterr().out


def test_import_skips_bad_rows(tmp_path, capsys):
    src = tmp_path / "import.json"
    src.write_text(json.dumps(DOC), encoding="utf-8")
    assert main(["import", "--db", str(tmp_path / "wg.db"), str(src)]) == 0
    out = capsys.readouterr().out
    assert "Imported 4 item(s), 2 dependency(ies)" in out


def test_graph(db, capsys):
    assert main(["graph", "--db", str(db), "spec-1"]) == 0
    data = json.loads(capsys.readouterr().out)["data"]
    assert data["criticalPath"] == ["C", "B", "A"]
    assert [n["id"] for n in data["nodes"]] == ["A", "B", "C"]


def test_graph_unweighted(db, capsys):
    assert main(["graph", "--db", str(db), "spec-1", "--unweighted"]) == 0
    data = json.loads(capsys.readouterr().out)["data"]
    assert data["criticalPath"] == ["C", "B", "A"]


def test_add_and_remove(db, capsys):
    assert main(["add", "--db", str(db), "A", "C"]) == 0
    assert json.loads(capsys.readouterr().out) == {"success": True}
    assert main(["remove", "--db", str(db), "A", "C"]) == 0
    assert capsys.readouterr().out == ""


def test_cycle_goes_to_stderr(db, capsys):
    assert main(["add", "--db", str(db), "C", "A"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    err = json.loads(captured.err)["error"]
    assert err["code"] == "CYCLE_DETECTED"
    assert err["cycle"] == ["C", "A", "B", "C"]


def test_cross_spec_rejected(db, capsys):
    assert main(["add", "--db", str(db), "A", "Z"]) == 1
    assert json.loads(capsys.readouterr().err)["error"]["reason"] == "cross-spec"


def test_remove_missing(db, capsys):
    assert main(["remove", "--db", str(db), "C", "A"]) == 1
    assert json.loads(capsys.readouterr().err)["error"]["code"] == "NOT_FOUND"


def test_imported_cycle_is_reported(tmp_path, capsys):
    doc = {
        "items": [{"id": x, "specId": "s"} for x in ("X", "Y", "Z")],
        "dependencies": [{"from": "X", "to": "Y"}, {"from": "Y", "to": "Z"},
                         {"from": "Z", "to": "X"}],
    }
    src = tmp_path / "cyclic.json"
    src.write_text(json.dumps(doc), encoding="utf-8")
    db = tmp_path / "wg.db"
    assert main(["import", "--db", str(db), str(src)]) == 0
    assert main(["graph", "--db", str(db), "s"]) == 0
    data = json.loads(capsys.readouterr().out.split("\n", 1)[1])["data"]
    assert data["cycles"] == [["X", "Y", "Z"]]
    assert data["criticalPath"] == []


def test_missing_import_file(tmp_path, capsys):
    assert main(["import", "--db", str(tmp_path / "wg.db"), str(tmp_path / "nope.json")]) == 1
    assert capsys.readouterr().err.startswith("error:")
