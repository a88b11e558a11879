"""Wide-column store adapter tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from graph.errors import ColumnFamilyNotFoundError, StoreError, TableNotFoundError
from store.admin import StoreAdmin
from store.sql_store import SQLStore
from store.table import RowMutation, WideColumnTable


def build_table(tmp_path: Path) -> WideColumnTable:
    store = SQLStore(db_path=tmp_path / "store.db")
    StoreAdmin(store).create_table("SocialNetworkBFF", ["friends", "info"])
    return store.table("SocialNetworkBFF", required_families=["friends", "info"])


def test_missing_table_is_reported(tmp_path: Path) -> None:
    store = SQLStore(db_path=tmp_path / "store.db")
    store.create_all()
    with pytest.raises(TableNotFoundError):
        store.table("SocialNetworkBFF")


def test_missing_family_is_reported(tmp_path: Path) -> None:
    store = SQLStore(db_path=tmp_path / "store.db")
    StoreAdmin(store).create_table("SocialNetworkBFF", ["info"])
    with pytest.raises(ColumnFamilyNotFoundError) as excinfo:
        store.table("SocialNetworkBFF", required_families=["friends", "info"])
    assert excinfo.value.family == "friends"


def test_create_table_only_adds_missing_families(tmp_path: Path) -> None:
    store = SQLStore(db_path=tmp_path / "store.db")
    admin = StoreAdmin(store)
    assert admin.create_table("people", ["info"]) == ["info"]
    assert admin.create_table("people", ["friends", "info"]) == ["friends"]
    assert admin.table_exists("people")
    admin.drop_table("people")
    assert not admin.table_exists("people")


def test_get_unknown_row_returns_none(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    assert table.get("nobody") is None


def test_upsert_leaves_unnamed_cells_untouched(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    table.upsert(RowMutation("alice").put("info", "age", "30").put("friends", "bob"))
    table.upsert(RowMutation("alice").put("info", "technology", "spark"))

    row = table.get("alice")
    assert row is not None
    assert row.family("info") == {"age": "30", "technology": "spark"}
    assert row.family("friends") == {"bob": ""}


def test_upsert_applies_explicit_deletes(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    table.upsert(RowMutation("alice").put("friends", "bob").put("friends", "carol"))
    table.upsert(RowMutation("alice").delete("friends", "bob").put("info", "bff", "bob"))

    row = table.get("alice")
    assert row is not None
    assert set(row.family("friends")) == {"carol"}
    assert row.value("info", "bff") == "bob"


def test_upsert_rejects_unknown_family(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    with pytest.raises(ColumnFamilyNotFoundError):
        table.upsert(RowMutation("alice").put("hobbies", "chess"))
    assert table.get("alice") is None


def test_scan_returns_rows_in_key_order(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    for name in ["carol", "alice", "bob"]:
        table.upsert(RowMutation(name).put("info", "name", name))
    assert [row.row_key for row in table.scan()] == ["alice", "bob", "carol"]


def test_closed_handles_refuse_work(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    table.close()
    with pytest.raises(StoreError):
        table.get("alice")

    other = build_table(tmp_path)
    other.store.close()
    with pytest.raises(StoreError):
        other.get("alice")


def break_cells_table(store: SQLStore) -> None:
    """Replace the cells table with one that lacks every data column."""
    with store.engine.begin() as conn:
        conn.execute(text("DROP TABLE store_cells"))
        conn.execute(text("CREATE TABLE store_cells (id INTEGER PRIMARY KEY)"))


def test_sqlalchemy_failures_surface_as_store_errors(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    break_cells_table(table.store)

    with pytest.raises(StoreError) as read_error:
        table.get("alice")
    with pytest.raises(StoreError) as write_error:
        table.upsert(RowMutation("alice").put("info", "name", "alice"))

    assert isinstance(read_error.value.__cause__, OperationalError)
    assert isinstance(write_error.value.__cause__, OperationalError)


def test_failed_session_is_rolled_back_and_closed(tmp_path: Path) -> None:
    table = build_table(tmp_path)
    broken = MagicMock()
    broken.query.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))
    table.store._session_factory = MagicMock(return_value=broken)

    with pytest.raises(StoreError) as excinfo:
        table.get("alice")

    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert "disk I/O error" in str(excinfo.value)
    broken.rollback.assert_called_once()
    broken.commit.assert_not_called()
    broken.close.assert_called_once()
