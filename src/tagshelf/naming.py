# Filename defaults, sanitization, and destination building for tagshelf.
# This module is pure logic and must remain side-effect free.
#
# Keeping this code isolated enables reliable unit testing.

from __future__ import annotations

from pathlib import Path

# Pattern used when none is given on the command line.
DEFAULT_PATTERN = (
    "{album_artist}/{orig_year?year+ – }{album}/{disc+-}{track?track_number} – {title}.{extension}"
)

# Inserted in place of forbidden characters and of tags that resolve to nothing.
DEFAULT_PLACEHOLDER = "_"

# Characters rejected on Windows filenames, plus the pattern braces.
# We replace them on every platform to keep collections portable.
FORBIDDEN_CHARS = '{}/|\\<:>?*"'


def sanitize(text: str, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    # Replace every forbidden character with the placeholder.
    # No trimming or casing: tag values are otherwise kept as-is.
    return text.translate(str.maketrans({ch: placeholder for ch in FORBIDDEN_CHARS}))


def validate_placeholder(placeholder: str) -> str:
    # A placeholder must itself be a safe, single character.
    if len(placeholder) != 1:
        raise ValueError("placeholder must be exactly one character")
    if placeholder in FORBIDDEN_CHARS:
        raise ValueError(f"placeholder '{placeholder}' is a forbidden path character")
    return placeholder


def build_destination(target_dir: Path, relative: str) -> Path:
    # Join a rendered pattern onto the target directory.
    # Rendered names use '/' as the folder separator on every platform.
    if relative.startswith("/"):
        raise ValueError(f"Rendered path must be relative: '{relative}'")
    parts = relative.split("/")
    if any(part == ".." for part in parts):
        raise ValueError(f"Rendered path escapes the target directory: '{relative}'")
    # Every component must name a real folder or file: no "", no ".".
    if any(part in ("", ".") for part in parts):
        raise ValueError(f"Rendered path has an empty or '.' component: '{relative}'")
    return target_dir.joinpath(*parts)
