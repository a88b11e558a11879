"""Top-level application wiring with scoped resource release."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.runtime_config import ensure_runtime_dirs, load_effective_config
from graph.audit_log import MutationAuditLog
from graph.engine import RelationshipEngine
from store.sql_store import SQLStore
from store.table import WideColumnTable

logger = logging.getLogger("bff.orchestrator")


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    store: SQLStore
    table: WideColumnTable
    engine: RelationshipEngine
    audit_log: MutationAuditLog


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, config_path: Path | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.config_path = config_path

    def load_config(self) -> dict[str, Any]:
        return load_effective_config(self.root, self.config_path)

    @contextmanager
    def connect(self) -> Iterator[tuple[dict[str, Any], SQLStore, dict[str, Path]]]:
        """Open the store connection and close it on every exit path."""
        config = self.load_config()
        paths = ensure_runtime_dirs(self.root, config)
        store = SQLStore(paths["db_path"])
        try:
            store.create_all()
            yield config, store, paths
        finally:
            store.close()

    @contextmanager
    def open(self) -> Iterator[RuntimeBundle]:
        """Yield a ready bundle; the table handle is released before the connection."""
        with self.connect() as (config, store, paths):
            store_cfg = config["store"]
            table = store.table(store_cfg["table"], required_families=store_cfg["families"])
            try:
                audit_log = MutationAuditLog(paths["audit_log_path"])
                yield RuntimeBundle(
                    config=config,
                    store=store,
                    table=table,
                    engine=RelationshipEngine(table=table, audit_log=audit_log),
                    audit_log=audit_log,
                )
            finally:
                table.close()
                logger.debug("Released table handle %s", table.name)
