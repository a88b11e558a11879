"""Command-line surface tests."""

from __future__ import annotations

import json
from pathlib import Path

from sqlalchemy import text
from typer.testing import CliRunner

from store.sql_store import SQLStore
from ui.cli.cli import app

runner = CliRunner()

ALICE_SESSION = "\n".join(["", "alice", "y", "bob", "y", "carol", "y", "", "", ""]) + "\n"


def invoke(root: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--root", str(root), *args], input=input)


def test_session_requires_provisioned_table(tmp_path: Path) -> None:
    result = invoke(tmp_path, "session", input="\n")
    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_init_table_is_idempotent(tmp_path: Path) -> None:
    first = invoke(tmp_path, "init-table")
    second = invoke(tmp_path, "init-table")

    assert first.exit_code == 0
    assert "friends, info" in first.output
    assert second.exit_code == 0
    assert "already provisioned" in second.output


def test_session_then_show_list_and_check(tmp_path: Path) -> None:
    invoke(tmp_path, "init-table")

    session = invoke(tmp_path, "session", input=ALICE_SESSION)
    assert session.exit_code == 0, session.output
    assert "Saved 'alice'" in session.output

    shown = invoke(tmp_path, "show", "Alice")
    assert shown.exit_code == 0
    assert json.loads(shown.output) == {
        "name": "alice",
        "bff": "bob",
        "friends": ["carol"],
        "age": None,
        "technology": None,
    }

    listed = invoke(tmp_path, "list")
    names = [json.loads(line)["name"] for line in listed.output.splitlines()]
    assert names == ["alice", "bob", "carol"]

    checked = invoke(tmp_path, "check")
    assert checked.exit_code == 0
    assert "Graph is consistent" in checked.output

    audit_path = tmp_path / "logs" / "mutations.jsonl"
    assert len(audit_path.read_text(encoding="utf-8").splitlines()) == 3


def test_show_unknown_person(tmp_path: Path) -> None:
    invoke(tmp_path, "init-table")
    result = invoke(tmp_path, "show", "nobody")
    assert result.exit_code == 1
    assert "No record for 'nobody'" in result.output


def test_interrupted_input_exits_with_error(tmp_path: Path) -> None:
    invoke(tmp_path, "init-table")
    result = invoke(tmp_path, "session", input="\nalice\ny\n")
    assert result.exit_code == 1
    assert "input closed" in result.output.lower()


def test_config_show_merges_override(tmp_path: Path) -> None:
    override = tmp_path / "custom.yaml"
    override.write_text("store:\n  table: Friends\n", encoding="utf-8")

    result = runner.invoke(app, ["--root", str(tmp_path), "--config", str(override), "config", "show"])

    assert result.exit_code == 0
    config = json.loads(result.output)
    assert config["store"]["table"] == "Friends"
    assert config["store"]["families"] == ["friends", "info"]


def test_unknown_log_level_is_rejected(tmp_path: Path) -> None:
    result = invoke(tmp_path, "--log-level", "chatty", "config", "show")
    assert result.exit_code == 2


def test_store_failure_exits_with_error(tmp_path: Path) -> None:
    invoke(tmp_path, "init-table")
    store = SQLStore(db_path=tmp_path / "workspace" / "social_network.db")
    with store.engine.begin() as conn:
        conn.execute(text("DROP TABLE store_cells"))
        conn.execute(text("CREATE TABLE store_cells (id INTEGER PRIMARY KEY)"))
    store.close()

    result = invoke(tmp_path, "show", "alice")

    assert result.exit_code == 1
    assert "Store operation failed" in result.output
