"""Graph-wide consistency checks over stored people."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from graph.audit_log import MutationAuditLog
from graph.person import Person
from store.table import WideColumnTable

MISSING_BFF = "missing_bff"
EXCLUSIVITY = "exclusivity"
RECIPROCITY = "reciprocity"
DANGLING_REFERENCE = "dangling_reference"


@dataclass(frozen=True)
class Violation:
    kind: str
    person: str
    other: str | None
    detail: str


def find_violations(people: Iterable[Person], entered: Iterable[str] = ()) -> list[Violation]:
    """Report every invariant that does not hold across ``people``.

    ``entered`` lists the names that were explicitly entered by an operator;
    only those must carry a bff; auto-created rows may not have one yet.
    """
    by_name = {person.name: person for person in people}
    violations: list[Violation] = []

    for name in sorted(set(entered)):
        person = by_name.get(name)
        if person is None or not person.bff:
            violations.append(Violation(MISSING_BFF, name, None, f"{name} has no bff"))

    for name in sorted(by_name):
        person = by_name[name]
        references = set(person.friends)
        if person.bff:
            references.add(person.bff)
        for other in sorted(references):
            if other not in by_name:
                violations.append(
                    Violation(DANGLING_REFERENCE, name, other, f"{other} has no record")
                )
        if person.bff and person.bff in person.friends:
            violations.append(
                Violation(
                    EXCLUSIVITY,
                    name,
                    person.bff,
                    f"{person.bff} is both bff and friend of {name}",
                )
            )
        if person.bff and person.bff != name:
            counterpart = by_name.get(person.bff)
            if counterpart is not None and not counterpart.is_linked_to(name):
                violations.append(
                    Violation(
                        RECIPROCITY,
                        name,
                        person.bff,
                        f"{person.bff} does not list {name} as bff or friend",
                    )
                )
    return violations


def check_table(table: WideColumnTable, audit_log: MutationAuditLog | None = None) -> list[Violation]:
    """Run :func:`find_violations` over every row of ``table``.

    The principals recorded in ``audit_log`` count as explicitly entered.
    """
    people = [Person.from_row(snapshot) for snapshot in table.scan()]
    entered: set[str] = set()
    if audit_log is not None:
        entered = {
            event["principal"] for event in audit_log.read() if event.get("table") == table.name
        }
    return find_violations(people, entered=entered)
