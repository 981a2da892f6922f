# Unit tests for tagshelf.template.
# These tests validate pattern scanning, fallback and addendum rules,
# and the failure taxonomy.

from __future__ import annotations

import pytest

from tagshelf.errors import (
    MalformedToken,
    NestedOpener,
    TemplateError,
    UnexpectedCloser,
    UnterminatedToken,
)
from tagshelf.metadata import TagDictionary
from tagshelf.naming import DEFAULT_PATTERN
from tagshelf.template import check_pattern, compile_pattern, render


def _tags(extension=None, **values) -> TagDictionary:
    return TagDictionary(values=values, extension=extension)


# ---------------------------------------------------------------------------
# Literals and simple tokens
# ---------------------------------------------------------------------------


def test_literal_only_pattern_is_copied_verbatim() -> None:
    for pattern in ["", "plain", "Music/Various – Misc.flac", "a*b<c>"]:
        assert render(pattern, _tags()) == pattern


def test_present_tag_is_emitted() -> None:
    assert compile_pattern("{title}", _tags(TITLE="Song")) == ["Song"]


def test_missing_tag_emits_placeholder() -> None:
    assert compile_pattern("{title}", _tags()) == ["_"]
    assert render("{title}", _tags(), placeholder="#") == "#"


def test_empty_value_counts_as_missing() -> None:
    assert render("{title}", _tags(TITLE="")) == "_"


def test_tag_values_are_sanitized_but_literals_are_not() -> None:
    assert render("x:{title}", _tags(TITLE="AC/DC: Live")) == "x:AC_DC_ Live"


def test_values_are_not_trimmed_or_recased() -> None:
    assert render("[{artist}]", _tags(ARTIST="  mIxEd ")) == "[  mIxEd ]"


def test_aliases_and_underscores_in_tokens() -> None:
    tags = _tags(DISCNUMBER="2", TRACKNUMBER="07", DATE="1998")
    assert render("{disc}-{track} {year} {Track_Number}", tags) == "2-07 1998 07"


def test_end_to_end_path() -> None:
    tags = _tags(extension="flac", ALBUMARTIST="Air", ALBUM="Moon Safari")
    assert render("{album_artist}/{album}.{extension}", tags) == "Air/Moon Safari.flac"


def test_extension_comes_from_the_injected_field() -> None:
    assert render("{title}.{extension}", _tags(extension="ogg", TITLE="A")) == "A.ogg"
    assert render("{title}.{extension}", _tags(TITLE="A")) == "A._"


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------


def test_fallback_is_ignored_when_primary_present() -> None:
    tags = _tags(TRACKNUMBER="3", ARTIST="B")
    assert render("{track?artist}", tags) == "3"


def test_fallback_used_when_primary_missing() -> None:
    assert render("{orig_year?year}", _tags(DATE="2000")) == "2000"


def test_fallback_missing_too_emits_placeholder() -> None:
    assert render("{orig_year?year}", _tags()) == "_"


def test_fallback_chain_takes_first_present_tag() -> None:
    assert render("{composer?artist?title}", _tags(TITLE="T")) == "T"
    assert render("{composer?artist?title}", _tags(ARTIST="A", TITLE="T")) == "A"
    assert render("{composer?artist?title}", _tags()) == "_"


def test_fallback_value_is_sanitized() -> None:
    assert render("{album_artist?artist}", _tags(ARTIST="Simon & Garfunkel / Live")) == (
        "Simon & Garfunkel _ Live"
    )


# ---------------------------------------------------------------------------
# Addendum
# ---------------------------------------------------------------------------


def test_addendum_follows_present_tag() -> None:
    assert render("{disc+-}{track}", _tags(DISCNUMBER="1", TRACKNUMBER="04")) == "1-04"


def test_addendum_token_vanishes_when_tag_missing() -> None:
    assert render("{disc+-}{track}", _tags(TRACKNUMBER="04")) == "04"


def test_addendum_is_not_sanitized() -> None:
    assert render("{disc+ :: }", _tags(DISCNUMBER="1")) == "1 :: "


def test_addendum_keeps_opener_verbatim() -> None:
    assert render("{disc+{x}", _tags(DISCNUMBER="1")) == "1{x"


def test_marker_inside_addendum_discards_the_rest() -> None:
    assert render("{disc+ a+b}|", _tags(DISCNUMBER="1")) == "1 a|"
    assert render("{disc+ a?b}|", _tags(DISCNUMBER="1")) == "1 a|"


def test_original_year_present_suppresses_fallback_and_addendum() -> None:
    assert render("{orig_year?year+ – }", _tags(ORIGYEAR="1999")) == "1999"


def test_addendum_does_not_fire_on_fallback_value() -> None:
    assert render("{orig_year?year+ – }", _tags(DATE="2000")) == "2000"


def test_addendum_after_missing_fallback_emits_nothing() -> None:
    assert render("{orig_year?year+ – }x", _tags()) == "x"


# ---------------------------------------------------------------------------
# Default pattern
# ---------------------------------------------------------------------------


def test_default_pattern_with_full_tags() -> None:
    tags = _tags(
        extension="flac",
        ALBUMARTIST="Air",
        ORIGYEAR="1998",
        DATE="2008",
        ALBUM="Moon Safari",
        DISCNUMBER="1",
        TRACKNUMBER="01",
        TITLE="La femme d'argent",
    )
    assert render(DEFAULT_PATTERN, tags) == "Air/1998Moon Safari/1-01 – La femme d'argent.flac"


def test_default_pattern_with_sparse_tags() -> None:
    tags = _tags(extension="mp3", TITLE="Untitled")
    assert render(DEFAULT_PATTERN, tags) == "_/_/_ – Untitled.mp3"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_unknown_tag_is_malformed() -> None:
    with pytest.raises(MalformedToken) as info:
        render("{definitelynotatag}", _tags())
    assert info.value.raw == "definitelynotatag"


def test_empty_token_is_malformed() -> None:
    with pytest.raises(MalformedToken):
        render("{}", _tags())


def test_unknown_fallback_is_malformed_when_reached() -> None:
    with pytest.raises(MalformedToken) as info:
        render("{title?nope}", _tags())
    assert info.value.raw == "nope"


@pytest.mark.parametrize("pattern", ["}abc", "a?b", "a+b", "{title}}"])
def test_bare_closer_or_marker_is_unexpected(pattern: str) -> None:
    with pytest.raises(UnexpectedCloser):
        render(pattern, _tags(TITLE="x"))


def test_unexpected_closer_reports_position() -> None:
    with pytest.raises(UnexpectedCloser) as info:
        render("ab}", _tags())
    assert info.value.position == 2
    assert info.value.char == "}"


def test_nested_opener() -> None:
    with pytest.raises(NestedOpener) as info:
        render("{al{bum}", _tags())
    assert info.value.position == 3


def test_nested_opener_in_fallback_name() -> None:
    with pytest.raises(NestedOpener):
        render("{title?{artist}}", _tags())


@pytest.mark.parametrize("pattern", ["{title", "x{disc+-", "{title?artist+abc", "{orig_year?"])
def test_unclosed_token_is_unterminated(pattern: str) -> None:
    with pytest.raises(UnterminatedToken):
        render(pattern, _tags(TITLE="t", DISCNUMBER="1", ORIGYEAR="1"))


def test_errors_share_a_common_base() -> None:
    for pattern in ["{nope}", "}", "{{", "{"]:
        with pytest.raises(TemplateError):
            render(pattern, _tags())


def test_check_pattern_visits_every_name() -> None:
    check_pattern(DEFAULT_PATTERN)
    with pytest.raises(MalformedToken):
        check_pattern("{title?artist?bogus}")
    with pytest.raises(UnexpectedCloser):
        check_pattern("plain?")
