# Command-line interface definition for tagshelf.
# This file is responsible only for argument parsing, validation,
# and dispatch into core application logic.
#
# No filesystem mutation or business logic should live here.

from __future__ import annotations

from pathlib import Path as FSPath
from typing import List, Optional, Tuple

import typer
from rich.console import Console

from tagshelf import __version__
from tagshelf.core import run_diagnose, run_organize, run_render, run_tags, run_undo
from tagshelf.errors import TemplateError
from tagshelf.logging_undo import DEFAULT_LOG_NAME
from tagshelf.models import Action, Options, Verbosity
from tagshelf.naming import DEFAULT_PATTERN, DEFAULT_PLACEHOLDER, validate_placeholder
from tagshelf.template import check_pattern
from tagshelf.traverse import ACCEPTED_EXTENSIONS

app = typer.Typer(
    add_completion=False,
    help="Organize music files into folders and names built from their tags.",
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False, "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
):
    pass


def _checked_pattern(pattern: str, hint: str) -> str:
    try:
        check_pattern(pattern)
    except TemplateError as exc:
        raise typer.BadParameter(str(exc), param_hint=hint)
    return pattern


def _checked_placeholder(placeholder: str) -> str:
    try:
        return validate_placeholder(placeholder)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--placeholder")


def _resolve_verbosity(verbose: bool, quiet: bool) -> Verbosity:
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet are mutually exclusive")
    if verbose:
        return Verbosity.verbose
    if quiet:
        return Verbosity.quiet
    return Verbosity.normal


def _parse_assignments(assignments: List[str]) -> List[Tuple[str, str]]:
    # TAG=VALUE pairs; the value may itself contain '='.
    pairs = []
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected TAG=VALUE, got '{item}'")
        pairs.append((key, value))
    return pairs


@app.command(help="Copy or move music files into a tag-driven folder layout.")
def organize(
    source: FSPath = typer.Argument(
        ...,
        exists=True,
        readable=True,
        help="Directory (or single file) holding the music files.",
    ),
    target: FSPath = typer.Argument(
        ...,
        file_okay=False,
        help="Directory receiving the organized files. Created if missing.",
    ),

    # Naming.
    pattern: str = typer.Option(
        DEFAULT_PATTERN, "--format", "-f",
        help="Pattern used to build each file's path below the target directory.",
        rich_help_panel="Naming",
    ),
    placeholder: str = typer.Option(
        DEFAULT_PLACEHOLDER, "--placeholder", "-p",
        help="Character replacing forbidden characters and missing tags.",
        rich_help_panel="Naming",
    ),

    # Safety and UX.
    move: bool = typer.Option(
        False, "--move",
        help="Move files instead of copying them.",
        rich_help_panel="Safety & UX",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run",
        help="Preview operations without touching any file.",
        rich_help_panel="Safety & UX",
    ),
    log_path: Optional[FSPath] = typer.Option(
        None, "--log",
        help=f"Path for the operation log (defaults to TARGET/{DEFAULT_LOG_NAME}).",
        rich_help_panel="Safety & UX",
    ),
    report_path: Optional[FSPath] = typer.Option(
        None, "--report",
        help="Write a per-file CSV report to this path.",
        rich_help_panel="Safety & UX",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show debug output (probes, built names, progress).",
        rich_help_panel="Safety & UX",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors and the summary.",
        rich_help_panel="Safety & UX",
    ),

    # Selection.
    extensions: List[str] = typer.Option(
        ACCEPTED_EXTENSIONS, "--ext",
        help="Accepted file extensions.",
        rich_help_panel="Selection",
    ),
    include: List[str] = typer.Option(
        [], "--include",
        help="Only process files matching these patterns.",
        rich_help_panel="Selection",
    ),
    exclude: List[str] = typer.Option(
        [], "--exclude",
        help="Skip files matching these patterns.",
        rich_help_panel="Selection",
    ),
):
    opts = Options(
        source=source,
        target=target,

        pattern=_checked_pattern(pattern, "--format"),
        placeholder=_checked_placeholder(placeholder),

        action=Action.move if move else Action.copy,
        dry_run=dry_run,

        extensions=extensions,
        include=include,
        exclude=exclude,

        log_path=log_path if log_path else target / DEFAULT_LOG_NAME,
        report_path=report_path,

        verbosity=_resolve_verbosity(verbose, quiet),
    )

    counters = run_organize(opts)
    if counters.failed:
        raise typer.Exit(code=1)


@app.command(help="Render a pattern against tags given as TAG=VALUE.")
def render(
    pattern: str = typer.Argument(..., help="Pattern to render."),
    assignments: List[str] = typer.Argument(
        None,
        help="Tag values, e.g. ALBUM='Moon Safari' album_artist=Air.",
    ),
    extension: Optional[str] = typer.Option(
        None, "--extension", "-e",
        help="Value of the {extension} tag.",
    ),
    placeholder: str = typer.Option(
        DEFAULT_PLACEHOLDER, "--placeholder", "-p",
        help="Character replacing forbidden characters and missing tags.",
    ),
):
    pairs = _parse_assignments(assignments or [])
    placeholder = _checked_placeholder(placeholder)
    try:
        result = run_render(pattern, pairs, extension, placeholder)
    except TemplateError as exc:
        raise typer.BadParameter(str(exc), param_hint="PATTERN")
    # Plain output so the result can be piped.
    typer.echo(result)


@app.command(help="Check a pattern for syntax errors and unknown tags.")
def check(
    pattern: str = typer.Argument(..., help="Pattern to check."),
):
    _checked_pattern(pattern, "PATTERN")
    console.print("[green]OK[/green]")


@app.command(help="List the tag names accepted in patterns.")
def tags():
    run_tags()


@app.command(help="Undo copies and moves recorded in a log file.")
def undo(
    log_path: FSPath = typer.Argument(..., help="Log file written by organize."),
    dry_run: bool = typer.Option(
        False, "--dry-run",
        help="Preview undo operations without making changes.",
    ),
    yes: bool = typer.Option(
        False, "--yes",
        help="Skip all confirmation prompts.",
    ),
):
    run_undo(log_path=log_path, dry_run=dry_run, yes=yes)


@app.command(help="Check availability of external dependencies.")
def diagnose():
    run_diagnose()


if __name__ == "__main__":
    app()
