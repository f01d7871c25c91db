"""Compose a message into one wide glyph grid."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .font_catalog import FontCatalog
from .glyph_grid import GlyphGrid

__all__ = ["Banner", "compose_banner"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Banner:
    """Composed image of ``message``; treat ``grid`` as read-only."""

    message: str
    grid: GlyphGrid

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def fill(self) -> str:
        return self.grid.fill

    def get(self, col: int, row: int) -> str:
        return self.grid.get(col, row)


def compose_banner(message: str, catalog: FontCatalog) -> Banner:
    """Lay out the glyphs of ``message`` left to right on a common top edge.

    Each glyph is drawn at the running cursor, which then advances by the
    glyph width plus its kerning.  Glyphs are composited transparently so a
    negative kerning lets neighbours overlap without erasing each other.
    The banner is as wide as the final cursor; ink past it is cropped.
    Unknown characters raise :class:`~blockbanner.errors.MissingGlyphError`.
    """

    grid = GlyphGrid(0, 0, catalog.fill)
    cursor = 0
    for char in message:
        glyph = catalog.char_image(char)
        dst_col = cursor
        cursor += glyph.width + glyph.kern
        grid.grow(
            max(grid.width, dst_col + glyph.width, cursor),
            max(grid.height, glyph.height),
        )
        # Columns left of 0 are clipped by ``set``.
        grid.copy_rect(glyph.grid, 0, 0, dst_col, 0, transparent=True)
    width = max(0, cursor)
    if width < grid.width:
        cropped = GlyphGrid(width, grid.height, grid.fill)
        cropped.copy_rect(grid, 0, 0, 0, 0, width=width)
        grid = cropped
    logger.debug(
        "composed banner %r into %dx%d grid", message, grid.width, grid.height
    )
    return Banner(message=message, grid=grid)
