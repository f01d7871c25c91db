"""Public blockbanner API: fonts, glyph grids, banners and the scroll renderer."""
from __future__ import annotations

from .banner import Banner, compose_banner
from .banner_config import BannerSettings, load_banner_config
from .errors import BannerError, ConfigError, MissingGlyphError, ParseError
from .font_catalog import (
    EmbeddedFontSource,
    FileFontSource,
    FontCatalog,
    Glyph,
    load_font,
    parse_font,
)
from .glyph_grid import GlyphGrid
from .runtime.scroll_renderer import (
    CancellationToken,
    ScrollControl,
    ScrollLoop,
    ScrollState,
    frame_text,
    render_frame,
)

__all__ = [
    "Banner",
    "BannerError",
    "BannerSettings",
    "CancellationToken",
    "ConfigError",
    "EmbeddedFontSource",
    "FileFontSource",
    "FontCatalog",
    "Glyph",
    "GlyphGrid",
    "MissingGlyphError",
    "ParseError",
    "ScrollControl",
    "ScrollLoop",
    "ScrollState",
    "compose_banner",
    "frame_text",
    "load_banner_config",
    "load_font",
    "parse_font",
    "render_frame",
]
