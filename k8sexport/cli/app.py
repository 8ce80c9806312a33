"""Main Typer application for ``k8s-export``.

Entry point: ``k8s-export`` (configured via pyproject.toml console_scripts).

Example::

    k8s-export --db member/snap/db -o ./exported
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from k8sexport import __description__, __version__
from k8sexport.catalog import default_registry
from k8sexport.config import ExportSettings
from k8sexport.core.errors import ExportError
from k8sexport.core.exporter import export_snapshot
from k8sexport.models.config import ExportConfig

PROG = "k8s-export"

app = typer.Typer(
    name=PROG,
    help=__description__,
    rich_markup_mode="rich",
    add_completion=False,
)

err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _fail(message: str) -> NoReturn:
    typer.echo(f"{PROG}: {message}", err=True)
    raise typer.Exit(code=1)


def _print_types() -> None:
    registry = default_registry()
    stats = registry.get_stats()
    table = Table(title=f"Registered resource types ({stats['total']})")
    table.add_column("apiVersion", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Schema")
    for entry in registry:
        table.add_row(entry.api_version, entry.kind, entry.schema.name)

    console = Console()
    console.print(table)
    for api_version, count in stats["by_api_version"].items():
        console.print(f"  {api_version}: {count}", highlight=False)


@app.command(name="export", help="Export every resource in an etcd snapshot to YAML files.")
def export_cmd(
    ctx: typer.Context,
    db: Path = typer.Option(
        None,
        "--db",
        help="Path to the etcd bbolt snapshot (e.g. member/snap/db).",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory to write YAML files into (created if absent).",
    ),
    separator: bool = typer.Option(
        None,
        "--separator/--no-separator",
        help="Start each document with a '---' marker.",
    ),
    prefix: str = typer.Option(
        None,
        "--prefix",
        help="Only export keys under this prefix (default /registry/).",
    ),
    bucket: str = typer.Option(
        None,
        "--bucket",
        help="Bolt bucket holding the key revisions (default key).",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level for stderr (DEBUG, INFO, WARNING, ERROR).",
    ),
    list_types: bool = typer.Option(
        False,
        "--list-types",
        help="List the registered resource types and exit.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
    ),
) -> None:
    """Export every protobuf resource in an etcd snapshot as canonical YAML.

    Each key revision under the prefix becomes
    ``OUTPUT/<key path>-<main>-<sub>.yaml``.  Resource types the catalog
    does not know are reported on stdout as ``Unknown <apiVersion>/<kind>``.
    """
    if version:
        typer.echo(f"{PROG} {__version__}")
        return
    if list_types:
        _print_types()
        return

    if db is None or output is None:
        typer.echo(ctx.get_usage(), err=True)
        missing = ", ".join(
            name for name, value in (("--db", db), ("--output", output)) if value is None
        )
        _fail(f"missing required option(s): {missing}")

    try:
        settings = ExportSettings()
    except ValidationError as exc:
        _fail(f"invalid environment settings: {exc.errors()[0]['msg']}")
    try:
        _configure_logging(log_level or settings.log_level)
    except ValueError as exc:
        _fail(f"invalid log level: {exc}")

    try:
        config = ExportConfig.from_settings(
            db,
            output,
            settings=settings,
            prefix=prefix,
            bucket=bucket,
            document_separator=separator,
        )
        report = export_snapshot(config, notify=typer.echo)
    except ExportError as exc:
        _fail(str(exc))

    err_console.print(f"[bold]{PROG}:[/bold] {report.summary()}", highlight=False)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
