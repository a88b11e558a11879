"""SQLite SQLAlchemy store wrapper."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from graph.errors import ColumnFamilyNotFoundError, StoreError, TableNotFoundError
from store.schemas import Base, ColumnFamilyRecord, TableRecord
from store.table import WideColumnTable

logger = logging.getLogger("bff.store")


class SQLStore:
    """Provides SQLAlchemy session management for SQLite persistence.

    This is the process-wide connection: open it once, hand out table
    handles with :meth:`table`, and :meth:`close` it on every exit path.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(f"sqlite+pysqlite:///{self.db_path}", future=True)
        self._session_factory = sessionmaker(bind=self.engine, future=True)
        self.closed = False

    def create_all(self) -> None:
        """Create the bookkeeping tables if missing."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager that commits on success and rolls back on error."""
        if self.closed:
            raise StoreError(f"Store connection to {self.db_path} is closed.")
        sess = self._session_factory()
        try:
            yield sess
            sess.commit()
        except SQLAlchemyError as exc:
            sess.rollback()
            raise StoreError(f"Store operation failed: {exc}") from exc
        except Exception:
            sess.rollback()
            raise
        finally:
            sess.close()

    def table(self, name: str, required_families: Iterable[str] = ()) -> WideColumnTable:
        """Open a handle on an existing table.

        Raises ``TableNotFoundError`` when the table was never provisioned and
        ``ColumnFamilyNotFoundError`` when one of ``required_families`` is
        missing from it.
        """
        with self.session() as sess:
            if sess.query(TableRecord).filter(TableRecord.name == name).first() is None:
                raise TableNotFoundError(name)
            families = {
                row.family
                for row in sess.query(ColumnFamilyRecord).filter(
                    ColumnFamilyRecord.table_name == name
                )
            }
        for family in required_families:
            if family not in families:
                raise ColumnFamilyNotFoundError(name, family)
        logger.debug("Opened table %s with families %s", name, sorted(families))
        return WideColumnTable(store=self, name=name, families=families)

    def close(self) -> None:
        """Dispose the engine; further sessions raise ``StoreError``."""
        if self.closed:
            return
        self.engine.dispose()
        self.closed = True
        logger.debug("Closed store connection %s", self.db_path)
