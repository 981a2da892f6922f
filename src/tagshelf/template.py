# Pattern compilation for tagshelf.
# Turns a pattern such as "{album_artist}/{album}/{track} – {title}.{extension}"
# into a relative path for one file, given that file's tags.
#
# This module is pure logic: no I/O, no shared state between calls.

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List

from tagshelf.errors import (
    MalformedToken,
    NestedOpener,
    UnexpectedCloser,
    UnterminatedToken,
)
from tagshelf.metadata import MetadataProvider, TagDictionary
from tagshelf.naming import DEFAULT_PLACEHOLDER, sanitize
from tagshelf.tags import resolve_tag

OPENER = "{"
CLOSER = "}"
FALLBACK_MARKER = "?"
ADDENDUM_MARKER = "+"

# Any of these ends a tag name.
MARKERS = CLOSER + FALLBACK_MARKER + ADDENDUM_MARKER


class ScanState(Enum):
    PLAIN = "plain"
    COMPOSING = "composing"
    SKIP_TO_CLOSE = "skip-to-close"
    PILE_LITERAL = "pile-literal"


@dataclass(frozen=True)
class Scan:
    """Scanner position between two characters.

    start is the index where the tag name being composed begins;
    opened_at is the index of the '{' of the current token.
    """

    state: ScanState = ScanState.PLAIN
    start: int = 0
    opened_at: int = -1
    fallback: bool = False


def compile_pattern(
    pattern: str,
    provider: MetadataProvider,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> List[str]:
    """Compile a pattern against one file's tags into ordered fragments.

    Raises a TemplateError subclass on the first syntax problem or unknown
    tag name. Missing tag values are not errors: they fall back to the next
    tag after '?' or to the placeholder.
    """
    fragments: List[str] = []
    scan = Scan()

    for pos, ch in enumerate(pattern):
        scan = _step(scan, pattern, pos, ch, provider, placeholder, fragments)

    if scan.state is not ScanState.PLAIN:
        raise UnterminatedToken(scan.opened_at)

    return fragments


def render(
    pattern: str,
    provider: MetadataProvider,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> str:
    return "".join(compile_pattern(pattern, provider, placeholder))


def check_pattern(pattern: str) -> None:
    # With no tags at all every token walks its whole fallback chain,
    # so each tag name in the pattern gets resolved once.
    compile_pattern(pattern, TagDictionary())


def _step(
    scan: Scan,
    pattern: str,
    pos: int,
    ch: str,
    provider: MetadataProvider,
    placeholder: str,
    fragments: List[str],
) -> Scan:
    state = scan.state

    if state is ScanState.SKIP_TO_CLOSE:
        if ch == CLOSER:
            return Scan()
        return scan

    if state is ScanState.PILE_LITERAL:
        if ch == CLOSER:
            return Scan()
        if ch in MARKERS:
            return replace(scan, state=ScanState.SKIP_TO_CLOSE)
        fragments.append(ch)
        return scan

    if state is ScanState.COMPOSING:
        if ch == OPENER:
            raise NestedOpener(pos)
        if ch in MARKERS:
            return _resolve(scan, pattern[scan.start:pos], pos, ch, provider, placeholder, fragments)
        return scan

    # Plain text.
    if ch == OPENER:
        return Scan(state=ScanState.COMPOSING, start=pos + 1, opened_at=pos)
    if ch in MARKERS:
        raise UnexpectedCloser(ch, pos)
    fragments.append(ch)
    return scan


def _resolve(
    scan: Scan,
    raw: str,
    pos: int,
    marker: str,
    provider: MetadataProvider,
    placeholder: str,
    fragments: List[str],
) -> Scan:
    tag = resolve_tag(raw)
    if tag is None:
        raise MalformedToken(raw, pos)

    value = provider.lookup(tag)

    if value is not None:
        fragments.append(sanitize(value, placeholder))
        if marker == CLOSER:
            return Scan()
        # The addendum only decorates a tag that was present on its own.
        if marker == ADDENDUM_MARKER and not scan.fallback:
            return replace(scan, state=ScanState.PILE_LITERAL)
        return replace(scan, state=ScanState.SKIP_TO_CLOSE)

    if marker == FALLBACK_MARKER:
        return replace(scan, start=pos + 1, fallback=True)

    if marker == CLOSER:
        fragments.append(placeholder)
        return Scan()

    # Addendum on a missing tag: the whole token vanishes.
    return replace(scan, state=ScanState.SKIP_TO_CLOSE)
