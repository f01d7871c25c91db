from __future__ import annotations

import pytest

from blockbanner.banner import compose_banner
from blockbanner.errors import MissingGlyphError
from blockbanner.font_catalog import (
    EmbeddedFontSource,
    FontCatalog,
    load_font,
    parse_font,
)


def _two_glyph_font(b_kern: int = 0, a_kern: int = 0) -> FontCatalog:
    return parse_font(
        [
            f"=A k={a_kern}",
            " aaa",
            " aaa",
            f"=B k={b_kern}",
            " bb",
            " bb",
        ],
        fill=".",
    )


def test_glyphs_are_laid_out_left_to_right() -> None:
    banner = compose_banner("AB", _two_glyph_font())

    assert (banner.width, banner.height) == (5, 2)
    for row in range(2):
        assert [banner.get(col, row) for col in range(3)] == ["a", "a", "a"]
        assert [banner.get(col, row) for col in range(3, 5)] == ["b", "b"]
    assert banner.grid.rows() == ["aaabb", "aaabb"]
    assert banner.message == "AB"


def test_height_is_tallest_glyph() -> None:
    catalog = parse_font(["=A", " #", "=B", " #", " #", " #"], fill=".")

    banner = compose_banner("AB", catalog)

    assert banner.grid.rows() == ["##", ".#", ".#"]


def test_positive_kerning_adds_spacing() -> None:
    banner = compose_banner("AB", _two_glyph_font(a_kern=2))

    assert banner.grid.rows() == ["aaa..bb", "aaa..bb"]


def test_trailing_kerning_extends_banner() -> None:
    banner = compose_banner("AB", _two_glyph_font(b_kern=1))

    assert banner.width == 6
    assert banner.grid.rows() == ["aaabb.", "aaabb."]


def test_negative_kerning_overlaps_transparently() -> None:
    catalog = parse_font(["=A k=-1", " #_", " #_", "=B", " _#", " _#"], fill=".")

    banner = compose_banner("AB", catalog)

    assert banner.width == 3
    assert banner.grid.rows() == ["#.#", "#.#"]


def test_negative_kerning_on_last_glyph_shrinks_width() -> None:
    catalog = parse_font(["=A k=-1", " ##", "=B k=-1", " ##"], fill=".")

    banner = compose_banner("AB", catalog)

    assert banner.width == (2 - 1) + (2 - 1)
    assert banner.grid.rows() == ["##"]


def test_width_never_drops_below_zero() -> None:
    catalog = parse_font(["=A k=-5", " ##"], fill=".")

    banner = compose_banner("A", catalog)

    assert banner.width == 0
    assert banner.get(0, 0) == "."


def test_empty_glyph_advances_by_kerning_only() -> None:
    catalog = parse_font(["= k=2", "=A", " #"], fill=".")

    banner = compose_banner("A A", catalog)

    assert banner.grid.rows() == ["#..#"]


def test_empty_message_yields_empty_banner() -> None:
    banner = compose_banner("", _two_glyph_font())

    assert (banner.width, banner.height) == (0, 0)
    assert banner.get(0, 0) == "."


def test_missing_character_aborts_composition() -> None:
    with pytest.raises(MissingGlyphError) as excinfo:
        compose_banner("ABC", _two_glyph_font())

    assert excinfo.value.char == "C"


def test_banner_fill_follows_font() -> None:
    banner = compose_banner("A", _two_glyph_font())

    assert banner.fill == "."


def test_builtin_font_composes_message() -> None:
    catalog = load_font(EmbeddedFontSource("block"))

    banner = compose_banner("HI", catalog)

    # H (5) + kern 1 + I (3) + kern 1
    assert (banner.width, banner.height) == (10, 5)
    assert banner.grid.row_text(0) == "#   # ### "
    assert banner.grid.row_text(2) == "#####  #  "
