# Shared data models for tagshelf.
# Lives in its own module to avoid circular imports between cli and core.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path as FSPath
from typing import List, Optional


class Action(str, Enum):
    copy = "copy"
    move = "move"


class Verbosity(int, Enum):
    quiet = 0
    normal = 1
    verbose = 2


@dataclass(frozen=True)
class Options:
    source: FSPath
    target: FSPath

    pattern: str
    placeholder: str

    action: Action
    dry_run: bool

    extensions: List[str]
    include: List[str]
    exclude: List[str]

    log_path: FSPath
    report_path: Optional[FSPath]

    verbosity: Verbosity = Verbosity.normal
