# Unit tests for tagshelf.naming.
# These tests validate sanitization rules and destination building.

from __future__ import annotations

from pathlib import Path

import pytest

from tagshelf.metadata import TagDictionary
from tagshelf.naming import (
    FORBIDDEN_CHARS,
    build_destination,
    sanitize,
    validate_placeholder,
)
from tagshelf.template import render


def test_sanitize_replaces_every_forbidden_character() -> None:
    assert sanitize('a{b}c/d|e\\f<g:h>i?j*k"l') == "a_b_c_d_e_f_g_h_i_j_k_l"
    assert sanitize(FORBIDDEN_CHARS) == "_" * len(FORBIDDEN_CHARS)


def test_sanitize_uses_given_placeholder() -> None:
    assert sanitize("AC/DC: Live", "-") == "AC-DC- Live"


def test_sanitize_leaves_clean_values_untouched() -> None:
    for value in ["Moon Safari", "  spaced  ", "Sigur Rós – ( ) [ ] + = , ;", ""]:
        assert sanitize(value) == value


def test_sanitize_is_idempotent() -> None:
    for value in ['What? "Now" / Then*', "{}{}", "plain"]:
        once = sanitize(value)
        assert sanitize(once) == once


def test_validate_placeholder() -> None:
    assert validate_placeholder("_") == "_"
    assert validate_placeholder("-") == "-"
    with pytest.raises(ValueError):
        validate_placeholder("")
    with pytest.raises(ValueError):
        validate_placeholder("__")
    with pytest.raises(ValueError):
        validate_placeholder("/")


def test_build_destination_joins_rendered_folders(tmp_path: Path) -> None:
    dest = build_destination(tmp_path, "Air/Moon Safari/01 – La femme d'argent.flac")
    assert dest == tmp_path / "Air" / "Moon Safari" / "01 – La femme d'argent.flac"


def test_build_destination_rejects_escaping_paths(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        build_destination(tmp_path, "/etc/passwd")
    with pytest.raises(ValueError):
        build_destination(tmp_path, "../outside.flac")
    with pytest.raises(ValueError):
        build_destination(tmp_path, "")


def test_build_destination_rejects_dot_and_empty_components(tmp_path: Path) -> None:
    # A title of "." must not turn the album folder into a file.
    relative = render("{album}/{title}", TagDictionary(values={"ALBUM": "Air", "TITLE": "."}))
    with pytest.raises(ValueError):
        build_destination(tmp_path, relative)
    for bad in ["Air//x.flac", "Air/./x.flac", "Air/", "."]:
        with pytest.raises(ValueError):
            build_destination(tmp_path, bad)
