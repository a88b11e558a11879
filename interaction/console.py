"""Operator input/output sources."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Protocol

import typer

from graph.errors import InputClosedError


class Console(Protocol):
    def write(self, text: str) -> None: ...

    def read_line(self) -> str: ...


class TerminalConsole:
    """Reads operator answers from stdin and echoes through typer.

    Prompts are written separately through :meth:`write`, so answers are read
    with a bare ``input()`` rather than ``typer.prompt``, which would print a
    prompt of its own and reject empty answers used as skip values.
    """

    def write(self, text: str) -> None:
        typer.echo(text)

    def read_line(self) -> str:
        try:
            return input()
        except EOFError as exc:
            raise InputClosedError("Operator input closed.") from exc


class ScriptedConsole:
    """Replays a fixed sequence of answers and records everything written."""

    def __init__(self, lines: Iterable[str]) -> None:
        self.pending: deque[str] = deque(lines)
        self.output: list[str] = []

    def write(self, text: str) -> None:
        self.output.append(text)

    def read_line(self) -> str:
        if not self.pending:
            raise InputClosedError("Scripted input exhausted.")
        return self.pending.popleft()
