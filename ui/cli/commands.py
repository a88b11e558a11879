"""Typer command handlers."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer

from core.orchestrator import Orchestrator
from core.session import InteractiveSession
from graph.consistency import check_table
from graph.errors import SocialNetworkError
from graph.person import Person
from interaction.collector import InputCollector
from interaction.console import Console, TerminalConsole
from store.admin import StoreAdmin

logger = logging.getLogger("bff.cli")


def configure(
    root: Path | None = None,
    config_path: Path | None = None,
    log_level: str | None = None,
) -> Orchestrator:
    """Build the orchestrator and set the logging level from config."""
    orchestrator = Orchestrator(root=root, config_path=config_path)
    with _fail_on_errors():
        config = orchestrator.load_config()
    level_name = (log_level or config["logging"]["level"]).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        typer.echo(f"Error: unknown log level '{level_name}'", err=True)
        raise typer.Exit(code=2)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)
    return orchestrator


@contextmanager
def _fail_on_errors() -> Iterator[None]:
    """Turn project errors into a message and exit status 1."""
    try:
        yield
    except (SocialNetworkError, ValueError, FileNotFoundError) as exc:
        logger.debug("Command failed", exc_info=True)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def session(orchestrator: Orchestrator, console: Console | None = None) -> None:
    """Run the interactive protocol until the operator quits."""
    console = console or TerminalConsole()
    with _fail_on_errors(), orchestrator.open() as bundle:
        typer.echo(f"Connected to table {bundle.table.name}")
        InteractiveSession(InputCollector(console), bundle.engine).run()


def show(orchestrator: Orchestrator, name: str) -> None:
    """Print one person's record as JSON."""
    with _fail_on_errors(), orchestrator.open() as bundle:
        person = bundle.engine.load(name.lower())
    if not person.exists:
        typer.echo(f"No record for '{name}'", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(person.to_public_dict(), indent=2))


def list_people(orchestrator: Orchestrator) -> None:
    """Print every stored person, one JSON object per line."""
    with _fail_on_errors(), orchestrator.open() as bundle:
        people = [Person.from_row(snapshot) for snapshot in bundle.table.scan()]
    for person in people:
        typer.echo(json.dumps(person.to_public_dict()))


def check(orchestrator: Orchestrator) -> None:
    """Report invariant violations across the graph."""
    with _fail_on_errors(), orchestrator.open() as bundle:
        violations = check_table(bundle.table, audit_log=bundle.audit_log)
    if not violations:
        typer.echo("Graph is consistent")
        return
    for violation in violations:
        typer.echo(f"{violation.kind}: {violation.detail}")
    raise typer.Exit(code=1)


def init_table(orchestrator: Orchestrator) -> None:
    """Create the configured table and families if missing."""
    with _fail_on_errors(), orchestrator.connect() as (config, store, _paths):
        store_cfg = config["store"]
        added = StoreAdmin(store).create_table(store_cfg["table"], store_cfg["families"])
    if added:
        typer.echo(f"Table {store_cfg['table']} ready (added families: {', '.join(added)})")
    else:
        typer.echo(f"Table {store_cfg['table']} already provisioned")


def config_show(orchestrator: Orchestrator) -> None:
    """Show effective runtime config."""
    typer.echo(json.dumps(orchestrator.load_config(), indent=2))
