"""originmatch CLI - check origins against an allow-list from the shell."""

from __future__ import annotations

import json
import logging
import sys

import click
import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from originmatch.config import OriginMatchConfig, load_config
from originmatch.exceptions import OriginSpecError
from originmatch.matcher_set import MatcherSet
from originmatch.parser import check_strict, parse

console = Console()

LOG_LEVELS = ["debug", "info", "warning", "error"]


def _configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
    )


def _resolve_spec(spec: str | None, config: OriginMatchConfig) -> str:
    return config.allowed_origins if spec is None else spec


def _build_allowed(spec: str | None, config: OriginMatchConfig) -> MatcherSet:
    if spec is None:
        return config.matcher_set()
    if config.strict and spec:
        for item in spec.split(","):
            check_strict(item)
    return parse(spec)


@click.group()
@click.option(
    "--config", "-c",
    "config_file",
    type=click.Path(exists=True),
    help="Path to YAML or TOML config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default: from config, warning)",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None, verbose: bool, log_level: str | None):
    """originmatch - decide whether an Origin is on the allow-list.

    Specs are comma-separated and may use one wildcard label run:

        originmatch check -s "https://*.example.com,localhost:3000" https://app.example.com

    Without --spec the ORIGINMATCH_ALLOWED_ORIGINS setting is used.
    """
    try:
        config = load_config(config_file)
    except (OSError, ValueError) as e:
        console.print(f"[red]Failed to load config: {escape(str(e))}[/red]")
        sys.exit(1)

    _configure_logging("debug" if verbose else (log_level or config.log_level))
    ctx.obj = config


@main.command()
@click.argument("origins", nargs=-1, required=True)
@click.option("--spec", "-s", default=None, help="Comma-separated origin specs")
@click.pass_obj
def check(config: OriginMatchConfig, origins: tuple[str, ...], spec: str | None):
    """Check ORIGINS against the allow-list.

    Exits with status 1 if any origin is denied.
    """
    try:
        allowed = _build_allowed(spec, config)
    except OriginSpecError as e:
        console.print(f"[red]Invalid spec:[/red] {escape(str(e))}")
        sys.exit(1)

    denied = 0
    for origin in origins:
        if allowed.matches(origin):
            console.print(f"[green]allowed[/green] {escape(origin)}")
        else:
            denied += 1
            console.print(f"[red]denied[/red]  {escape(origin)}")

    if denied:
        sys.exit(1)


@main.command()
@click.option("--spec", "-s", default=None, help="Comma-separated origin specs")
@click.pass_obj
def lint(config: OriginMatchConfig, spec: str | None):
    """Strict-check every spec in the allow-list.

    A spec fails when it is invalid or when it carries parts that are
    ignored during matching (path, query, upper-case letters, ...).
    """
    text = _resolve_spec(spec, config)
    if not text:
        console.print("[dim]No origin specs configured[/dim]")
        return

    failures = 0
    for item in text.split(","):
        try:
            check_strict(item)
        except OriginSpecError as e:
            failures += 1
            console.print(f"[red]error[/red] {escape(str(e))}")
        else:
            console.print(f"[green]ok[/green]    {escape(item)}")

    if failures:
        sys.exit(1)


@main.command()
@click.option("--spec", "-s", default=None, help="Comma-separated origin specs")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_obj
def show(config: OriginMatchConfig, spec: str | None, json_output: bool):
    """Show how each spec in the allow-list was parsed."""
    try:
        allowed = _build_allowed(spec, config)
    except OriginSpecError as e:
        console.print(f"[red]Invalid spec:[/red] {escape(str(e))}")
        sys.exit(1)

    rows = [matcher.to_dict() for matcher in allowed]
    if json_output:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        console.print("[dim]Empty allow-list, every origin is denied[/dim]")
        return

    table = Table()
    table.add_column("Spec", style="cyan")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Port")
    table.add_column("Pattern", style="dim")
    for row in rows:
        table.add_row(
            escape(row["spec"]),
            row["kind"],
            row.get("port", ""),
            escape(row.get("pattern") or ""),
        )
    console.print(table)


@main.command()
def version():
    """Show version information."""
    from originmatch import __version__

    console.print(f"[bold]Version:[/bold] {__version__}")
    console.print(f"[bold]Python:[/bold] {sys.version}")


if __name__ == "__main__":
    main()
