"""Configuration loading and runtime directory bootstrapping."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from graph.person import REQUIRED_FAMILIES

DEFAULT_TABLE = "SocialNetworkBFF"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Create the database and audit log directories and return resolved paths."""
    store_cfg = config.get("store", {})
    paths_cfg = config.get("paths", {})
    db_path = (root / store_cfg.get("db_path", "workspace/social_network.db")).resolve()
    audit_log_path = (root / paths_cfg.get("audit_log_path", "logs/mutations.jsonl")).resolve()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    audit_log_path.parent.mkdir(parents=True, exist_ok=True)

    return {
        "db_path": db_path,
        "audit_log_path": audit_log_path,
    }


def load_effective_config(root: Path, override_path: Path | None = None) -> dict[str, Any]:
    """Load defaults, then merge ``config/local.yaml`` and an explicit override."""
    config_dir = root / "config"
    merged = load_yaml(config_dir / "default.yaml")
    merged = merge_dicts(merged, load_yaml(config_dir / "local.yaml"))
    if override_path is not None:
        if not override_path.exists():
            raise FileNotFoundError(f"Config file not found: {override_path}")
        merged = merge_dicts(merged, load_yaml(override_path))

    store_cfg = merged.setdefault("store", {})
    store_cfg.setdefault("table", DEFAULT_TABLE)
    store_cfg.setdefault("families", list(REQUIRED_FAMILIES))
    merged.setdefault("logging", {}).setdefault("level", "WARNING")
    return merged
