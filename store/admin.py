"""Table provisioning helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import delete

from store.schemas import CellRecord, ColumnFamilyRecord, TableRecord
from store.sql_store import SQLStore

logger = logging.getLogger("bff.store.admin")


class StoreAdmin:
    """Creates and drops logical tables and their column families."""

    def __init__(self, store: SQLStore) -> None:
        self.store = store
        self.store.create_all()

    def table_exists(self, name: str) -> bool:
        with self.store.session() as sess:
            return sess.query(TableRecord).filter(TableRecord.name == name).first() is not None

    def create_table(self, name: str, families: Iterable[str]) -> list[str]:
        """Create ``name`` if missing and add any missing families.

        Returns the families that were added.
        """
        added: list[str] = []
        with self.store.session() as sess:
            if sess.query(TableRecord).filter(TableRecord.name == name).first() is None:
                sess.add(TableRecord(name=name))
            existing = {
                row.family
                for row in sess.query(ColumnFamilyRecord).filter(
                    ColumnFamilyRecord.table_name == name
                )
            }
            for family in families:
                if family in existing or family in added:
                    continue
                sess.add(ColumnFamilyRecord(table_name=name, family=family))
                added.append(family)
        logger.info("Provisioned table %s (added families: %s)", name, added)
        return added

    def drop_table(self, name: str) -> None:
        """Remove a table, its families and all of its cells."""
        with self.store.session() as sess:
            sess.execute(delete(CellRecord).where(CellRecord.table_name == name))
            sess.execute(delete(ColumnFamilyRecord).where(ColumnFamilyRecord.table_name == name))
            sess.execute(delete(TableRecord).where(TableRecord.name == name))
        logger.info("Dropped table %s", name)
