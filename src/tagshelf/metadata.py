# Per-file tag dictionaries and ffprobe integration for tagshelf.
# The template engine only ever sees the MetadataProvider protocol;
# everything that talks to the external probe binary lives here.
#
# Dictionaries are built fresh per file and never mutated afterwards.

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Protocol, Tuple

from tagshelf.errors import ProbeError
from tagshelf.tags import ALIASES, Tag

FFPROBE = "ffprobe"

# ffprobe prefixes container and stream tags with this marker in "default" output.
_TAG_PREFIX = "TAG:"


class MetadataProvider(Protocol):
    def lookup(self, tag: Tag) -> Optional[str]:
        ...


def normalize_key(key: str) -> str:
    # Raw keys from probes come as "album_artist", "Album Artist", "ALBUMARTIST"...
    # Uppercase and drop the first underscore or space.
    key = key.upper()
    for i, ch in enumerate(key):
        if ch in "_ ":
            return key[:i] + key[i + 1:]
    return key


def canonical_key(key: str) -> str:
    # Probes write "track", "disc", "year"; store them under the canonical name.
    key = normalize_key(key)
    tag = ALIASES.get(key)
    if tag is not None and tag is not Tag.EXTENSION:
        return tag.value
    return key


@dataclass(frozen=True)
class TagDictionary:
    """Read-only tag values for one file, plus the output extension.

    Keys are normalized on construction (see canonical_key), so raw probe
    names such as "album_artist" or "year" are accepted. The extension is
    injected by the caller and answers lookups of Tag.EXTENSION.
    """

    values: Mapping[str, str] = field(default_factory=dict)
    extension: Optional[str] = None

    def __post_init__(self) -> None:
        values = {canonical_key(key): value for key, value in self.values.items()}
        object.__setattr__(self, "values", MappingProxyType(values))

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Tuple[str, str]],
        extension: Optional[str] = None,
    ) -> "TagDictionary":
        # Later pairs win: ffprobe prints stream tags before container tags.
        values = {}
        for key, value in pairs:
            values[canonical_key(key)] = value
        return cls(values=values, extension=extension)

    def lookup(self, tag: Tag) -> Optional[str]:
        # Empty strings count as absent so fallbacks and placeholders kick in.
        if tag is Tag.EXTENSION:
            return self.extension or None
        return self.values.get(tag.value) or None


def parse_probe_output(text: str) -> List[Tuple[str, str]]:
    # Keep only "TAG:key=value" lines from ffprobe's default writer.
    # The value is everything after the first '=', surrounding spaces included.
    pairs = []
    for line in text.splitlines():
        if not line.startswith(_TAG_PREFIX):
            continue
        key, sep, value = line[len(_TAG_PREFIX):].partition("=")
        if not sep or not key:
            continue
        pairs.append((key, value))
    return pairs


def ffprobe_available() -> bool:
    return shutil.which(FFPROBE) is not None


def probe_tags(path: Path, extension: Optional[str] = None) -> TagDictionary:
    """Read the tags of a music file through ffprobe.

    The extension defaults to the file's own suffix, without the dot.
    Raises ProbeError when ffprobe is missing or rejects the file.
    """
    if not ffprobe_available():
        raise ProbeError(f"{FFPROBE} not found on PATH")

    cmd = [
        FFPROBE,
        "-v", "fatal",
        "-print_format", "default",
        "-show_format",
        "-show_streams",
        "-select_streams", "a",
        str(path),
    ]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ProbeError(f"{FFPROBE} failed on {path}: {exc}", details={"path": str(path)}) from exc

    if result.returncode != 0:
        raise ProbeError(
            f"{FFPROBE} could not read {path}: {result.stderr.strip() or 'exit ' + str(result.returncode)}",
            details={"path": str(path), "returncode": result.returncode},
        )

    if extension is None:
        extension = path.suffix.lstrip(".")

    return TagDictionary.from_pairs(parse_probe_output(result.stdout), extension=extension)
