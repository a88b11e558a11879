"""Named answer validators for the interactive protocol."""

from __future__ import annotations

import re
from dataclasses import dataclass

from graph.person import TECHNOLOGIES


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one answer: the normalized value or an error."""

    value: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Validator:
    """Full-match format check applied to the lower-cased answer."""

    name: str
    pattern: str

    def validate(self, answer: str, label: str) -> ValidationResult:
        normalized = answer.lower()
        if re.fullmatch(self.pattern, normalized):
            return ValidationResult(value=normalized)
        return ValidationResult(
            value=normalized,
            error=f"Invalid format, please answer with a valid '{label}'",
        )


NAME_REGEX = r"^[a-z]+$"

CONTINUE_CHOICE = Validator("ContinueChoice", r"^$|^q$")
STAY_CHOICE = Validator("StayChoice", r"^$|^s$")
NAME_FORMAT = Validator("NameFormat", r"^$|" + NAME_REGEX)
BFF_FORMAT = Validator("BffFormat", NAME_REGEX)
# 0 to 99, no leading zeros, or empty to skip.
AGE_FORMAT = Validator("AgeFormat", r"^$|^[0-9]$|^[1-9][0-9]$")
TECHNOLOGY_CHOICE = Validator(
    "TechnologyChoice", r"^$|" + "|".join(f"^{choice}$" for choice in TECHNOLOGIES)
)
YES_NO = Validator("YesNo", r"^y$|^n$")


def as_validator(checker: Validator | str) -> Validator:
    """Accept either a named validator or a bare regular expression."""
    if isinstance(checker, Validator):
        return checker
    return Validator("Custom", checker)
