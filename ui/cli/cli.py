"""CLI entrypoint for SocialNetworkBFF."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="SocialNetworkBFF: people, their bff and their friends")
config_app = typer.Typer(help="Configuration commands")


@app.callback()
def main_callback(
    ctx: typer.Context,
    root: Path | None = typer.Option(None, "--root", help="Project root holding config/"),
    config: Path | None = typer.Option(None, "--config", help="Extra YAML config to merge"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override logging level"),
) -> None:
    """Load configuration and logging before any command runs."""
    ctx.obj = commands.configure(root=root, config_path=config, log_level=log_level)


@app.command("session")
def session_cmd(ctx: typer.Context) -> None:
    """Interactive session entering people one after another."""
    commands.session(ctx.obj)


@app.command("show")
def show_cmd(ctx: typer.Context, name: str = typer.Argument(..., help="Person name")) -> None:
    """Show one person's record."""
    commands.show(ctx.obj, name=name)


@app.command("list")
def list_cmd(ctx: typer.Context) -> None:
    """List every stored person."""
    commands.list_people(ctx.obj)


@app.command("check")
def check_cmd(ctx: typer.Context) -> None:
    """Check graph-wide consistency."""
    commands.check(ctx.obj)


@app.command("init-table")
def init_table_cmd(ctx: typer.Context) -> None:
    """Provision the configured table and its column families."""
    commands.init_table(ctx.obj)


@config_app.command("show")
def config_show_cmd(ctx: typer.Context) -> None:
    """Show effective configuration."""
    commands.config_show(ctx.obj)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
