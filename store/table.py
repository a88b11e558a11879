"""Row-level access to one logical wide-column table."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import and_, or_

from graph.errors import ColumnFamilyNotFoundError, StoreError
from store.schemas import CellRecord

if TYPE_CHECKING:
    from store.sql_store import SQLStore

logger = logging.getLogger("bff.store")


@dataclass(frozen=True)
class RowSnapshot:
    """All cells of one row, grouped by family."""

    row_key: str
    families: dict[str, dict[str, str]] = field(default_factory=dict)

    def family(self, name: str) -> dict[str, str]:
        return dict(self.families.get(name, {}))

    def value(self, family: str, qualifier: str) -> str | None:
        return self.families.get(family, {}).get(qualifier)


@dataclass
class RowMutation:
    """Partial update of a single row.

    Only the cells named in ``puts`` are written and only the cells named in
    ``deletes`` are removed; every other cell of the row is left untouched.
    """

    row_key: str
    puts: dict[str, dict[str, str]] = field(default_factory=dict)
    deletes: list[tuple[str, str]] = field(default_factory=list)

    def put(self, family: str, qualifier: str, value: str = "") -> RowMutation:
        self.puts.setdefault(family, {})[qualifier] = value
        return self

    def delete(self, family: str, qualifier: str) -> RowMutation:
        if (family, qualifier) not in self.deletes:
            self.deletes.append((family, qualifier))
        self.puts.get(family, {}).pop(qualifier, None)
        return self

    @property
    def is_empty(self) -> bool:
        return not self.deletes and not any(self.puts.values())

    def to_dict(self) -> dict[str, object]:
        return {
            "row_key": self.row_key,
            "puts": {fam: dict(cells) for fam, cells in self.puts.items() if cells},
            "deletes": [list(item) for item in self.deletes],
        }


class WideColumnTable:
    """Handle on a provisioned table: get, upsert and scan rows by key."""

    def __init__(self, store: SQLStore, name: str, families: set[str]) -> None:
        self.store = store
        self.name = name
        self.families = set(families)
        self.closed = False

    def _ensure_open(self) -> None:
        if self.closed:
            raise StoreError(f"Table handle {self.name} is closed.")

    def _check_family(self, family: str) -> None:
        if family not in self.families:
            raise ColumnFamilyNotFoundError(self.name, family)

    def get(self, row_key: str) -> RowSnapshot | None:
        """Return the row for ``row_key`` or None when it has no cells."""
        self._ensure_open()
        with self.store.session() as sess:
            cells = (
                sess.query(CellRecord)
                .filter(CellRecord.table_name == self.name, CellRecord.row_key == row_key)
                .all()
            )
            return _snapshot(row_key, cells)

    def upsert(self, mutation: RowMutation) -> None:
        """Apply ``mutation`` to its row in one transaction."""
        self._ensure_open()
        for family in list(mutation.puts) + [fam for fam, _ in mutation.deletes]:
            self._check_family(family)
        if mutation.is_empty:
            return
        with self.store.session() as sess:
            if mutation.deletes:
                clauses = [
                    and_(CellRecord.family == fam, CellRecord.qualifier == qual)
                    for fam, qual in mutation.deletes
                ]
                (
                    sess.query(CellRecord)
                    .filter(
                        CellRecord.table_name == self.name,
                        CellRecord.row_key == mutation.row_key,
                        or_(*clauses),
                    )
                    .delete(synchronize_session=False)
                )
            for family, cells in mutation.puts.items():
                for qualifier, value in cells.items():
                    row = (
                        sess.query(CellRecord)
                        .filter(
                            CellRecord.table_name == self.name,
                            CellRecord.row_key == mutation.row_key,
                            CellRecord.family == family,
                            CellRecord.qualifier == qualifier,
                        )
                        .first()
                    )
                    if row is None:
                        sess.add(
                            CellRecord(
                                table_name=self.name,
                                row_key=mutation.row_key,
                                family=family,
                                qualifier=qualifier,
                                value=value,
                            )
                        )
                    else:
                        row.value = value
        logger.debug("Upserted %s/%s: %s", self.name, mutation.row_key, mutation.to_dict())

    def scan(self) -> Iterator[RowSnapshot]:
        """Yield every row of the table in key order."""
        self._ensure_open()
        with self.store.session() as sess:
            cells = (
                sess.query(CellRecord)
                .filter(CellRecord.table_name == self.name)
                .order_by(CellRecord.row_key, CellRecord.family, CellRecord.qualifier)
                .all()
            )
            grouped: dict[str, list[CellRecord]] = {}
            for cell in cells:
                grouped.setdefault(cell.row_key, []).append(cell)
            snapshots = [_snapshot(key, rows) for key, rows in grouped.items()]
        for snapshot in snapshots:
            if snapshot is not None:
                yield snapshot

    def close(self) -> None:
        self.closed = True


def _snapshot(row_key: str, cells: list[CellRecord]) -> RowSnapshot | None:
    if not cells:
        return None
    families: dict[str, dict[str, str]] = {}
    for cell in cells:
        families.setdefault(cell.family, {})[cell.qualifier] = cell.value
    return RowSnapshot(row_key=row_key, families=families)
