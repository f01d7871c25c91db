"""Fixed-size character buffer used for glyphs and composed banners."""
from __future__ import annotations

from typing import Iterable, Sequence

__all__ = ["GlyphGrid"]


class GlyphGrid:
    """Rectangular grid of single characters addressed as ``(col, row)``.

    Every cell starts out as ``fill``.  Reads outside the grid return ``fill``
    and writes outside it are ignored, so compositing code can draw without
    checking bounds first.  Columns wrap modulo ``width`` on reads which lets
    a banner tile seamlessly while it scrolls.
    """

    __slots__ = ("_width", "_height", "_fill", "_cells")

    def __init__(self, width: int, height: int, fill: str = " ") -> None:
        if width < 0 or height < 0:
            raise ValueError(
                f"grid dimensions must be non-negative, received {width}x{height}"
            )
        if not isinstance(fill, str) or len(fill) != 1:
            raise ValueError(f"fill must be a single character, received {fill!r}")
        self._width = int(width)
        self._height = int(height)
        self._fill = fill
        self._cells: list[str] = [fill] * (self._width * self._height)

    def __repr__(self) -> str:
        return f"GlyphGrid(width={self._width}, height={self._height}, fill={self._fill!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GlyphGrid):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._fill == other._fill
            and self._cells == other._cells
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def fill(self) -> str:
        return self._fill

    def _index(self, col: int, row: int) -> int:
        return row * self._width + col

    def get(self, col: int, row: int) -> str:
        """Return the character at ``(col, row)`` or ``fill`` when nothing is there."""

        if row < 0 or row >= self._height or self._width == 0:
            return self._fill
        return self._cells[self._index(col % self._width, row)]

    def set(self, col: int, row: int, ch: str) -> None:
        """Write ``ch`` at ``(col, row)``; out-of-range cells are ignored."""

        if not (0 <= row < self._height and 0 <= col < self._width):
            return
        self._cells[self._index(col, row)] = ch

    def clear(self, ch: str) -> None:
        """Set every cell to ``ch``."""

        self._cells = [ch] * (self._width * self._height)

    def copy_rect(
        self,
        source: "GlyphGrid",
        src_col: int,
        src_row: int,
        dst_col: int,
        dst_row: int,
        width: int = -1,
        height: int = -1,
        transparent: bool = False,
    ) -> None:
        """Copy a ``width`` x ``height`` block of ``source`` into this grid.

        Negative dimensions select the full source extent.  With
        ``transparent`` set, source cells equal to this grid's fill are
        skipped so background never paints over existing content.
        """

        if width < 0:
            width = source.width
        if height < 0:
            height = source.height
        for row in range(height):
            for col in range(width):
                ch = source.get(src_col + col, src_row + row)
                if transparent and ch == self._fill:
                    continue
                self.set(dst_col + col, dst_row + row, ch)

    def load_rows(self, rows: Iterable[str]) -> None:
        """Fill the grid row by row from ``rows``, padding with ``fill``."""

        lines: Sequence[str] = list(rows)
        for row in range(self._height):
            text = lines[row] if row < len(lines) else ""
            for col in range(self._width):
                self.set(col, row, text[col] if col < len(text) else self._fill)

    def grow(self, new_width: int, new_height: int) -> None:
        """Enlarge the grid in place, keeping the existing content at the origin."""

        new_width = max(int(new_width), self._width)
        new_height = max(int(new_height), self._height)
        if new_width == self._width and new_height == self._height:
            return
        previous = self.copy()
        self._width = new_width
        self._height = new_height
        self.clear(self._fill)
        self.copy_rect(previous, 0, 0, 0, 0, transparent=True)

    def copy(self) -> "GlyphGrid":
        """Return an independent grid with the same dimensions and content."""

        duplicate = GlyphGrid(self._width, self._height, self._fill)
        duplicate._cells = list(self._cells)
        return duplicate

    def row_text(self, row: int) -> str:
        """Return row ``row`` as a string of ``width`` characters."""

        if not 0 <= row < self._height:
            return self._fill * self._width
        start = self._index(0, row)
        return "".join(self._cells[start : start + self._width])

    def rows(self) -> list[str]:
        return [self.row_text(row) for row in range(self._height)]
