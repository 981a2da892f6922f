# Operation logging and undo support for tagshelf.
# This module owns all persistence related to copy/move history.
#
# The log format is append-only CSV to keep undo operations simple,
# auditable, and resilient to partial failures.

from __future__ import annotations

import csv
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from tagshelf.models import Action

DEFAULT_LOG_NAME = ".tagshelf-log.csv"

console = Console()


class LogWriter:
    # Append-only CSV writer for copy and move operations.
    # Each successful operation must be logged immediately.
    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh)

    def write_operation(self, action: Action, source: Path, destination: Path) -> None:
        ts = datetime.now().isoformat(timespec="seconds")
        self._writer.writerow([ts, action.value, str(source), str(destination)])
        self._fh.flush()

    def close(self) -> None:
        self._fh.close()


class ReportWriter:
    # Optional CSV report writer.
    # This is overwritten per run and is not used for undo.
    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh)
        self._writer.writerow(["source", "destination", "action", "status"])

    def write(
        self,
        source: Path,
        destination: Optional[Path],
        action: str,
        status: str,
    ) -> None:
        self._writer.writerow(
            [
                str(source),
                str(destination) if destination else "",
                action,
                status,
            ]
        )
        self._fh.flush()

    def close(self) -> None:
        self._fh.close()


def _read_operations(log_path: Path):
    rows = []
    with log_path.open("r", newline="", encoding="utf-8") as fh:
        for row in csv.reader(fh):
            if len(row) != 4:
                continue
            _, action, source, destination = row
            if action not in (Action.copy.value, Action.move.value):
                continue
            rows.append((Action(action), Path(source), Path(destination)))
    return rows


def undo_from_log(log_path: Path, dry_run: bool, yes: bool) -> int:
    # Reverse operations recorded in a log file, newest first.
    # A move is moved back; a copy is deleted only while its source still exists.
    # Returns the number of operations undone.
    if not log_path.exists():
        raise FileNotFoundError(f"Undo log not found: {log_path}")

    undone = 0
    for action, source, destination in reversed(_read_operations(log_path)):
        if not destination.exists():
            console.print(f"Missing, skipping undo: {destination}")
            continue

        if action is Action.move and source.exists():
            console.print(f"Conflict, skipping undo: {source}")
            continue

        if action is Action.copy and not source.exists():
            console.print(f"Source gone, keeping copy: {destination}")
            continue

        verb = "Move back" if action is Action.move else "Delete copy"

        if dry_run:
            console.print(f"DRY RUN UNDO: {verb.lower()} {destination}")
            continue

        if not yes:
            response = console.input(f"{verb}?\n  {destination}\n[y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                console.print(f"Skipping undo: {destination}")
                continue

        if action is Action.move:
            source.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(destination), str(source))
            console.print(f"Undone: {destination} -> {source}")
        else:
            destination.unlink()
            console.print(f"Removed copy: {destination}")
        undone += 1

    return undone
