"""Runtime wiring and configuration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.orchestrator import Orchestrator
from core.runtime_config import load_effective_config, load_yaml, merge_dicts
from graph.errors import TableNotFoundError
from graph.person import REQUIRED_FAMILIES, TECHNOLOGIES
from interaction.validators import TECHNOLOGY_CHOICE
from store.admin import StoreAdmin


def provision(orchestrator: Orchestrator) -> None:
    with orchestrator.connect() as (config, store, _paths):
        StoreAdmin(store).create_table(config["store"]["table"], config["store"]["families"])


def test_defaults_apply_without_config_files(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)
    assert config["store"]["table"] == "SocialNetworkBFF"
    assert config["store"]["families"] == ["friends", "info"]
    assert config["logging"]["level"] == "WARNING"


def test_local_config_overrides_defaults(tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "default.yaml").write_text(
        "store:\n  table: SocialNetworkBFF\n  db_path: a.db\n", encoding="utf-8"
    )
    (config_dir / "local.yaml").write_text("store:\n  db_path: b.db\n", encoding="utf-8")

    config = load_effective_config(tmp_path)

    assert config["store"] == {
        "table": "SocialNetworkBFF",
        "db_path": "b.db",
        "families": ["friends", "info"],
    }


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(path)


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts({"a": {"b": 1, "c": 2}, "d": 3}, {"a": {"c": 4}})
    assert merged == {"a": {"b": 1, "c": 4}, "d": 3}


def test_open_fails_when_table_is_missing(tmp_path: Path) -> None:
    with pytest.raises(TableNotFoundError):
        with Orchestrator(root=tmp_path).open():
            pass


def test_resources_released_on_error(tmp_path: Path) -> None:
    orchestrator = Orchestrator(root=tmp_path)
    provision(orchestrator)

    with pytest.raises(RuntimeError):
        with orchestrator.open() as bundle:
            bundle.engine.apply("alice", "bob")
            raise RuntimeError("boom")

    assert bundle.table.closed
    assert bundle.store.closed

    with orchestrator.open() as reopened:
        assert reopened.engine.load("alice").bff == "bob"


def test_technology_choices_follow_person_model(tmp_path: Path) -> None:
    assert TECHNOLOGIES == ("flink", "apex", "spark")
    for choice in TECHNOLOGIES:
        assert TECHNOLOGY_CHOICE.validate(choice.upper(), "technology").ok
    assert list(REQUIRED_FAMILIES) == load_effective_config(tmp_path)["store"]["families"]
