"""Person record model and its mapping onto table rows."""

from __future__ import annotations

from typing import Literal, get_args

from pydantic import BaseModel, Field

from store.table import RowSnapshot

NAME_PATTERN = r"^[a-z]+$"
Technology = Literal["flink", "apex", "spark"]
TECHNOLOGIES: tuple[str, ...] = get_args(Technology)

FRIENDS_FAMILY = "friends"
INFO_FAMILY = "info"
REQUIRED_FAMILIES = (FRIENDS_FAMILY, INFO_FAMILY)

# Qualifiers of the info family.
NAME_COLUMN = "name"
BFF_COLUMN = "bff"
INFO_COLUMNS = ("age", "technology")


class Person(BaseModel):
    """One node of the social graph as stored in its row."""

    name: str = Field(pattern=NAME_PATTERN)
    bff: str | None = Field(default=None, pattern=NAME_PATTERN)
    friends: set[str] = Field(default_factory=set)
    age: int | None = Field(default=None, ge=0, le=99)
    technology: Technology | None = None
    exists: bool = True

    @classmethod
    def placeholder(cls, name: str) -> Person:
        """Empty record for a name that has no row yet."""
        return cls(name=name, exists=False)

    @classmethod
    def from_row(cls, snapshot: RowSnapshot) -> Person:
        info = snapshot.family(INFO_FAMILY)
        age = info.get("age")
        return cls(
            name=snapshot.row_key,
            bff=info.get(BFF_COLUMN) or None,
            friends=set(snapshot.family(FRIENDS_FAMILY)),
            age=int(age) if age else None,
            technology=info.get("technology") or None,
        )

    def is_linked_to(self, other: str) -> bool:
        """True when ``other`` is this person's bff or one of its friends."""
        return self.bff == other or other in self.friends

    def to_public_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "bff": self.bff,
            "friends": sorted(self.friends),
            "age": self.age,
            "technology": self.technology,
        }
