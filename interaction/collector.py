"""Validated question/confirmation protocol with the operator."""

from __future__ import annotations

import logging

from interaction.console import Console
from interaction.validators import YES_NO, ValidationResult, Validator, as_validator

# Control answers (skip, quit, stay) are accepted without confirmation.
NO_CONFIRMATION = frozenset({"", "q", "s"})

logger = logging.getLogger("bff.collector")


class InputCollector:
    """Asks one question at a time until a valid, confirmed answer arrives."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def check_format(self, answer: str, label: str, validator: Validator) -> ValidationResult:
        result = validator.validate(answer, label)
        if not result.ok:
            logger.debug("%s rejected %r for %s", validator.name, answer, label)
            self.console.write(result.error or "")
        return result

    def ask_yn(self, answer: str, label: str) -> bool:
        """Confirm ``answer``; sentinel values are confirmed implicitly.

        Blocks until the operator types ``y`` or ``n``.
        """
        if answer in NO_CONFIRMATION:
            return True
        self.console.write(f"Confirm that your {label} is '{answer}' (y/n)")
        while True:
            result = self.check_format(self.console.read_line(), "y or n", YES_NO)
            if result.ok:
                return result.value == "y"

    def ask_question(self, prompt: str, label: str, validator: Validator | str) -> str:
        """Return the lower-cased answer once it matches and is confirmed.

        An empty string means the operator skipped the question.
        """
        validator = as_validator(validator)
        while True:
            self.console.write(prompt)
            result = self.check_format(self.console.read_line(), label, validator)
            if result.ok and self.ask_yn(result.value, label):
                return result.value
