"""SQLAlchemy schemas emulating a wide-column table layout."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Return UTC datetime for default timestamps."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base."""


class TableRecord(Base):
    """Registered logical tables."""

    __tablename__ = "store_tables"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)


class ColumnFamilyRecord(Base):
    """Column families (attribute groups) declared for a table."""

    __tablename__ = "store_column_families"
    __table_args__ = (UniqueConstraint("table_name", "family"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    table_name: Mapped[str] = mapped_column(String(128), index=True)
    family: Mapped[str] = mapped_column(String(64))


class CellRecord(Base):
    """One cell: (row key, family, qualifier) -> value."""

    __tablename__ = "store_cells"
    __table_args__ = (UniqueConstraint("table_name", "row_key", "family", "qualifier"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    table_name: Mapped[str] = mapped_column(String(128), index=True)
    row_key: Mapped[str] = mapped_column(String(255), index=True)
    family: Mapped[str] = mapped_column(String(64))
    qualifier: Mapped[str] = mapped_column(String(255))
    value: Mapped[str] = mapped_column(Text, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
