# Core orchestration logic for tagshelf.
# This file coordinates traversal, tag probing, path rendering, safety checks,
# logging, and undo integration.
#
# It intentionally contains no CLI parsing and no pattern scanning logic.

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Tuple

from rich.console import Console
from rich.table import Table

from tagshelf.errors import TagshelfError
from tagshelf.logging_undo import LogWriter, ReportWriter, undo_from_log
from tagshelf.metadata import TagDictionary, ffprobe_available, probe_tags
from tagshelf.models import Action, Options, Verbosity
from tagshelf.naming import build_destination
from tagshelf.tags import available_tags
from tagshelf.template import check_pattern, render
from tagshelf.traverse import iter_music_files

console = Console()
err_console = Console(stderr=True)


# Simple counters used for the mandatory summary block.
@dataclass
class Counters:
    copied: int = 0
    moved: int = 0
    skipped: int = 0
    exists: int = 0
    failed: int = 0


def run_diagnose() -> None:
    # Report availability of external tools.
    console.print("[bold]Tagshelf diagnose[/bold]")
    console.print(f"ffprobe: {'OK' if ffprobe_available() else 'missing'}")


def run_undo(log_path: Path, dry_run: bool, yes: bool) -> None:
    # Undo operations are delegated entirely to logging_undo.
    undone = undo_from_log(log_path=log_path, dry_run=dry_run, yes=yes)
    console.print(f"Undone: {undone}")


def run_tags() -> None:
    table = Table(title="Accepted tag names")
    table.add_column("Name")
    table.add_column("Canonical tag")
    for name, tag in available_tags():
        table.add_row(name, tag.value)
    console.print(table)


def run_render(
    pattern: str,
    pairs: Iterable[Tuple[str, str]],
    extension: Optional[str],
    placeholder: str,
) -> str:
    # Preview a pattern against tags given on the command line.
    tags = TagDictionary.from_pairs(pairs, extension=extension)
    return render(pattern, tags, placeholder)


def run_organize(opts: Options) -> Counters:
    # Entry point for organizing a collection.
    # This function is batch-safe and must never abort on a single failure.
    # A broken pattern fails for every file, so it is rejected up front.
    check_pattern(opts.pattern)

    counters = Counters()

    targets = list(
        iter_music_files(
            source=opts.source,
            extensions=opts.extensions,
            include=opts.include,
            exclude=opts.exclude,
        )
    )
    _debug(opts, f"{len(targets)} files found in {opts.source}")

    if not targets:
        _log(opts, f"No music files in {opts.source}")

    # Dry runs leave the filesystem alone, log included.
    log_writer = None if opts.dry_run else LogWriter(opts.log_path)
    report_writer = ReportWriter(opts.report_path) if opts.report_path else None

    try:
        for index, path in enumerate(targets, start=1):
            try:
                status = _process_one(path, opts, log_writer, report_writer)
            except Exception as exc:
                # Last-resort safety net.
                # We log and continue so a single bad file never kills a batch.
                status = "failed"
                err_console.print(f"[red]FAILED:[/red] {path} ({exc})")

            if status == "copied":
                counters.copied += 1
            elif status == "moved":
                counters.moved += 1
            elif status == "exists":
                counters.exists += 1
            elif status == "failed":
                counters.failed += 1
            else:
                counters.skipped += 1

            _debug(opts, f"Handled {100 * index // len(targets)}% of all files ({index}/{len(targets)})")
    finally:
        if log_writer:
            log_writer.close()
        if report_writer:
            report_writer.close()

    _print_summary(counters, opts)
    return counters


def _process_one(
    path: Path,
    opts: Options,
    log_writer: Optional[LogWriter],
    report_writer: Optional[ReportWriter],
) -> str:
    # Handle a single file.
    # Returns a normalized status string for summary accounting.
    _debug(opts, f"Probing {path}")

    try:
        tags = probe_tags(path)
        relative = render(opts.pattern, tags, opts.placeholder)
        destination = build_destination(opts.target, relative)
    except (TagshelfError, ValueError) as exc:
        err_console.print(f"[red]FAILED:[/red] {path} ({exc})")
        _report(report_writer, path, None, opts, "failed")
        return "failed"

    _debug(opts, f"Filename built: {destination}")

    if destination.resolve() == path.resolve():
        _log(opts, f"Already in place, skipping: {path}")
        _report(report_writer, path, destination, opts, "skipped")
        return "skipped"

    # Existing files are never overwritten.
    if destination.exists():
        _log(opts, f"Exists, skipping: {destination}")
        _report(report_writer, path, destination, opts, "exists")
        return "exists"

    done = "moved" if opts.action is Action.move else "copied"

    if opts.dry_run:
        _log(opts, f"DRY RUN: {opts.action.value} {path} -> {destination}")
        _report(report_writer, path, destination, opts, f"{done}:dry-run")
        return done

    if destination.parent.exists() and not destination.parent.is_dir():
        err_console.print(
            f"[red]FAILED:[/red] {path} ({destination.parent} exists but is not a directory)"
        )
        _report(report_writer, path, destination, opts, "failed")
        return "failed"

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        if opts.action is Action.move:
            shutil.move(str(path), str(destination))
        else:
            shutil.copy2(path, destination)
    except OSError as exc:
        err_console.print(f"[red]FAILED:[/red] {path} ({exc})")
        _report(report_writer, path, destination, opts, "failed")
        return "failed"

    _log(opts, f"{done.capitalize()}: {path} -> {destination}")
    if log_writer:
        log_writer.write_operation(action=opts.action, source=path, destination=destination)
    _report(report_writer, path, destination, opts, done)
    return done


def _log(opts: Options, message: str) -> None:
    if opts.verbosity >= Verbosity.normal:
        console.print(message)


def _debug(opts: Options, message: str) -> None:
    if opts.verbosity >= Verbosity.verbose:
        console.print(f"[dim]{message}[/dim]")


def _report(
    report_writer: Optional[ReportWriter],
    source: Path,
    destination: Optional[Path],
    opts: Options,
    status: str,
) -> None:
    if report_writer:
        report_writer.write(
            source=source,
            destination=destination,
            action=opts.action.value,
            status=status,
        )


def _print_summary(counters: Counters, opts: Options) -> None:
    # Mandatory summary block printed at end of every run.
    console.print()
    console.print("[bold]Summary[/bold]" + (" (dry run)" if opts.dry_run else ""))
    console.print(f"Copied:  {counters.copied}")
    console.print(f"Moved:   {counters.moved}")
    console.print(f"Skipped: {counters.skipped}")
    console.print(f"Exists:  {counters.exists}")
    console.print(f"Failed:  {counters.failed}")
    if not opts.dry_run:
        console.print(f"Log:     {opts.log_path}")
    if opts.report_path:
        console.print(f"Report:  {opts.report_path}")
