"""Relationship consistency engine.

Turns the answers collected for one person into the row mutations that keep
the whole graph consistent:

* the bff relation always wins over a friend entry for the same name,
* a bff choice is mirrored on the counterpart (as a friend, unless the
  counterpart already lists the principal as bff or friend),
* every referenced name ends up with a row of its own.

The store has no multi-row transactions, so the principal row is written
first and the compensating rows after it. A crash in between leaves the
counterpart unreconciled until one of the two names is processed again.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from graph.audit_log import MutationAuditLog
from graph.errors import MissingBffError
from graph.person import (
    BFF_COLUMN,
    FRIENDS_FAMILY,
    INFO_COLUMNS,
    INFO_FAMILY,
    NAME_COLUMN,
    Person,
)
from store.table import RowMutation, WideColumnTable

logger = logging.getLogger("bff.engine")


@dataclass
class CommitResult:
    """Mutations issued for one principal, in write order."""

    principal: str
    mutations: list[RowMutation] = field(default_factory=list)

    @property
    def touched_rows(self) -> list[str]:
        return [mutation.row_key for mutation in self.mutations]


class RelationshipEngine:
    """Computes and writes the mutations for one person's answers."""

    def __init__(self, table: WideColumnTable, audit_log: MutationAuditLog | None = None) -> None:
        self.table = table
        self.audit_log = audit_log

    def load(self, name: str) -> Person:
        """Load ``name`` or return an empty placeholder when it has no row."""
        snapshot = self.table.get(name)
        if snapshot is None:
            return Person.placeholder(name)
        return Person.from_row(snapshot)

    def plan(
        self,
        principal: str,
        bff: str | None,
        friend: str | None = None,
        info: Mapping[str, str] | None = None,
    ) -> list[RowMutation]:
        """Return the mutations ``apply`` would write, without writing them."""
        if not bff:
            raise MissingBffError(principal)
        info = dict(info or {})
        unknown = sorted(set(info) - set(INFO_COLUMNS))
        if unknown:
            raise ValueError(f"Unknown info attributes: {', '.join(unknown)}")
        # Skipped answers never erase what is already stored.
        provided = {key: value for key, value in info.items() if value}
        checked = Person(
            name=principal,
            bff=bff,
            age=int(provided["age"]) if "age" in provided else None,
            technology=provided.get("technology"),
        )

        person = self.load(principal)
        self_bff = bff == principal
        bff_person = person if self_bff else self.load(bff)

        own = RowMutation(principal)
        own.put(INFO_FAMILY, NAME_COLUMN, principal)
        own.put(INFO_FAMILY, BFF_COLUMN, bff)
        if bff in person.friends:
            own.delete(FRIENDS_FAMILY, bff)
        if friend:
            if friend == bff:
                logger.warning(
                    "Ignoring friend '%s' for '%s': already chosen as bff", friend, principal
                )
            else:
                own.put(FRIENDS_FAMILY, friend)
        if checked.age is not None:
            own.put(INFO_FAMILY, "age", str(checked.age))
        if checked.technology is not None:
            own.put(INFO_FAMILY, "technology", checked.technology)
        mutations = [own]

        if not self_bff and not bff_person.is_linked_to(principal):
            mutations.append(
                RowMutation(bff)
                .put(INFO_FAMILY, NAME_COLUMN, bff)
                .put(FRIENDS_FAMILY, principal)
            )

        if friend and friend not in (principal, bff):
            friend_person = self.load(friend)
            if not friend_person.exists:
                mutations.append(RowMutation(friend).put(INFO_FAMILY, NAME_COLUMN, friend))

        logger.info(
            "Planned %d mutation(s) for '%s': %s",
            len(mutations),
            principal,
            [mutation.to_dict() for mutation in mutations],
        )
        return mutations

    def apply(
        self,
        principal: str,
        bff: str | None,
        friend: str | None = None,
        info: Mapping[str, str] | None = None,
    ) -> CommitResult:
        """Plan and write the mutations for ``principal``, principal row first."""
        mutations = self.plan(principal, bff, friend=friend, info=info)
        result = CommitResult(principal=principal)
        for mutation in mutations:
            self.table.upsert(mutation)
            if self.audit_log is not None:
                self.audit_log.log(self.table.name, mutation, principal=principal)
            result.mutations.append(mutation)
        return result
