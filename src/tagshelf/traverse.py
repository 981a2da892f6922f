# Music file discovery for tagshelf.
# This module centralizes all path discovery logic so behavior is
# consistent across platforms.
#
# No copying or mutation is allowed here.

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Iterable, Iterator, List

# Containers whose tags ffprobe reads reliably.
ACCEPTED_EXTENSIONS = ["flac", "ogg", "dsf", "mp3", "m4a"]


def _matches_any(path: Path, patterns: List[str]) -> bool:
    # We test both the basename and the full path string to give users
    # flexible matching without platform-specific surprises.
    name = path.name
    full = str(path)

    for pat in patterns:
        if fnmatch.fnmatch(name, pat) or fnmatch.fnmatch(full, pat):
            return True

    return False


def _has_extension(path: Path, extensions: Iterable[str]) -> bool:
    suffix = path.suffix.lower().lstrip(".")
    return any(suffix == ext.lower().lstrip(".") for ext in extensions)


def iter_music_files(
    source: Path,
    extensions: List[str],
    include: List[str],
    exclude: List[str],
) -> Iterator[Path]:
    # Yield music files below source, recursively, in a stable order.
    # A single file given as source is yielded if it passes the filters.
    if source.is_file():
        candidates: Iterable[Path] = [source]
    else:
        candidates = _walk(source)

    for f in candidates:
        if not _has_extension(f, extensions):
            continue
        if exclude and _matches_any(f, exclude):
            continue
        if include and not _matches_any(f, include):
            continue
        yield f


def _walk(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, files in os.walk(root):
        dirnames.sort()
        for name in sorted(files):
            yield Path(dirpath) / name
