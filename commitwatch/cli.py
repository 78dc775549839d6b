"""CLI entry point for commitwatch."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from commitwatch.config import DEFAULT_CONFIG_TEMPLATE, WatchConfig, find_config_path, load_config
from commitwatch.config.loader import PROJECT_CONFIG, user_config_path
from commitwatch.errors import AuthError
from commitwatch.output import ConsoleSink, DesktopSink, FanoutSink
from commitwatch.sync import SyncEngine, YamlLedger
from commitwatch.vcs import RepositoryRef, create_source
from commitwatch.watcher import RepositoryWatcher

app = typer.Typer(
    name="commitwatch",
    help="Watch GitHub repositories and get notified about the commits you care about.",
)

config_app = typer.Typer(help="Manage commitwatch configuration.")
app.add_typer(config_app, name="config")

ledger_app = typer.Typer(help="Inspect the record of last seen commits.")
app.add_typer(ledger_app, name="ledger")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Global state
_config: WatchConfig | None = None
_config_path: str | None = None


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to commitwatch.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config, _config_path
    _config = None
    _config_path = config


def _get_config() -> WatchConfig:
    global _config
    if _config is None:
        try:
            _config = load_config(_config_path)
        except ValueError as e:
            rprint(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)
        _configure_logging(_config.log_level)
    return _config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS[level],
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _get_ledger(cfg: WatchConfig) -> YamlLedger:
    try:
        return YamlLedger(cfg.ledger_path)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def watch(
    once: bool = typer.Option(False, "--once", help="Check every repository once and exit"),
) -> None:
    """Watch the configured repositories for matching commits."""
    cfg = _get_config()
    sink = ConsoleSink()
    source_path = find_config_path(_config_path)
    sink.config_loaded(str(source_path) if source_path else None)

    # bail out quickly if there is nothing to watch
    if not cfg.notifications:
        sink.empty_config()
        raise typer.Exit(0)

    try:
        source = create_source(cfg)
    except ValueError as e:
        sink.fatal(str(e))
        raise typer.Exit(1)

    try:
        engine = SyncEngine(
            source,
            _get_ledger(cfg),
            page_size=cfg.page_size,
            max_concurrency=cfg.max_concurrency,
        )
        events = FanoutSink(sink, DesktopSink()) if cfg.desktop_notifications else sink
        watcher = RepositoryWatcher(
            cfg, engine, events, wait=sink.countdown, status=sink.inspecting
        )
        asyncio.run(watcher.run(max_cycles=1 if once else None))
    except AuthError as e:
        sink.fatal(str(e))
        raise typer.Exit(1)
    except KeyboardInterrupt:
        sink.console.print("Stopped.")
    finally:
        source.close()


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    data = cfg.model_dump(by_alias=True)
    if data.get("github_token"):
        data["github_token"] = "********"
    rprint(Syntax(yaml.dump(data, default_flow_style=False, sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
    user: bool = typer.Option(
        False, "--user", help="Write ~/.commitwatch/config.yaml instead of ./commitwatch.yaml"
    ),
) -> None:
    """Create a default config file."""
    target = user_config_path() if user else PROJECT_CONFIG
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


@config_app.command("edit")
def config_edit() -> None:
    """Open the config file in the default editor, creating it if needed."""
    target = Path(_config_path) if _config_path else (find_config_path() or user_config_path())
    if not target.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(DEFAULT_CONFIG_TEMPLATE)
        rprint(f"[green]Created[/green] {target}")
    typer.launch(str(target))


@config_app.command("path")
def config_path() -> None:
    """Print which config file is in effect."""
    path = find_config_path(_config_path)
    if path is None:
        typer.echo("(no config file, using defaults)")
    else:
        typer.echo(str(path.resolve()))


@ledger_app.command("show")
def ledger_show() -> None:
    """List the last seen commit of every repository."""
    cfg = _get_config()
    entries = _get_ledger(cfg).entries()
    if not entries:
        rprint("[yellow]The ledger is empty.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Ledger ({len(entries)})")
    table.add_column("Repository", style="cyan")
    table.add_column("Last seen commit", style="green")
    for uri, sha in sorted(entries.items()):
        table.add_row(uri, sha)
    rprint(table)


@ledger_app.command("forget")
def ledger_forget(
    repo: str = typer.Argument(..., help="Repository as owner/name"),
) -> None:
    """Drop a repository's record; the next check starts again from its head."""
    try:
        ref = RepositoryRef.parse(repo)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    cfg = _get_config()
    if not _get_ledger(cfg).forget(ref.uri):
        rprint(f"[yellow]No record for {ref.uri}.[/yellow]")
        raise typer.Exit(1)
    rprint(f"[green]Forgot[/green] {ref.uri}")


if __name__ == "__main__":
    app()
