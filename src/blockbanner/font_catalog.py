"""Parse font definitions into per-character glyph grids.

A font definition is line oriented.  Each glyph starts with a header line
``=<char>`` optionally followed by ``key=value`` fields (only ``k``, the
kerning adjustment, is recognised).  The glyph rows follow, one per line,
each introduced by a single space.  A trailing ``@`` terminator is stripped
from row text so rows may end in blanks; ``_`` and spaces inside a row are
background cells.

Fonts come either from a file on disk or from one of the definitions bundled
in :mod:`blockbanner.builtin_fonts`.  Both resolve to the same stream of lines
before parsing.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import NoReturn, Union

from .builtin_fonts import builtin_font_names, get_builtin_font
from .errors import ConfigError, MissingGlyphError, ParseError
from .glyph_grid import GlyphGrid

__all__ = [
    "EmbeddedFontSource",
    "FileFontSource",
    "FontCatalog",
    "FontSource",
    "Glyph",
    "HEADER_PREFIX",
    "ROW_PREFIX",
    "ROW_TERMINATOR",
    "load_font",
    "parse_font",
]

logger = logging.getLogger(__name__)

HEADER_PREFIX = "="
ROW_PREFIX = " "
ROW_TERMINATOR = "@"
BLANK_MARKER = "_"

_KERN_KEY = "k"
_HEADER_KEYS = frozenset({_KERN_KEY})


@dataclass(frozen=True)
class FileFontSource:
    """Font definition stored in a file on the host filesystem."""

    path: Path
    scheme: str = field(init=False, default="file")

    def describe(self) -> str:
        return str(self.path)

    def read_lines(self) -> list[str]:
        """Return the file's lines, reporting I/O failures as ``ConfigError``."""

        try:
            text = Path(self.path).read_text(encoding="utf-8")
        except OSError as exc:
            reason = exc.strerror or str(exc)
            raise ConfigError(f"cannot open font file {self.path}: {reason}") from exc
        except UnicodeDecodeError as exc:
            raise ConfigError(f"font file {self.path} is not valid UTF-8: {exc}") from exc
        return text.splitlines()


@dataclass(frozen=True)
class EmbeddedFontSource:
    """Font definition bundled with the package and identified by name."""

    name: str
    scheme: str = field(init=False, default="builtin")

    def describe(self) -> str:
        return f"<builtin:{self.name}>"

    def read_lines(self) -> list[str]:
        try:
            text = get_builtin_font(self.name)
        except KeyError:
            available = ", ".join(builtin_font_names())
            raise ConfigError(
                f"unknown built-in font {self.name!r} (available: {available})"
            ) from None
        return text.splitlines()


FontSource = Union[FileFontSource, EmbeddedFontSource]


@dataclass(frozen=True)
class Glyph:
    """Image for one character plus the spacing adjustment applied after it."""

    char: str
    grid: GlyphGrid
    kern: int = 0

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


class FontCatalog(Mapping[str, Glyph]):
    """Read-only mapping from characters to their :class:`Glyph`.

    Lookups of characters the font does not define raise
    :class:`MissingGlyphError`; there is no fallback glyph.
    """

    def __init__(
        self, glyphs: Mapping[str, Glyph], *, fill: str = " ", source: str = "<string>"
    ) -> None:
        self._glyphs: Mapping[str, Glyph] = MappingProxyType(dict(glyphs))
        self._fill = fill
        self._source = source

    def __getitem__(self, char: str) -> Glyph:
        try:
            return self._glyphs[char]
        except KeyError:
            raise MissingGlyphError(char, self._source) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._glyphs)

    def __len__(self) -> int:
        return len(self._glyphs)

    def __repr__(self) -> str:
        return f"FontCatalog(source={self._source!r}, glyphs={len(self._glyphs)})"

    @property
    def fill(self) -> str:
        return self._fill

    @property
    def source(self) -> str:
        return self._source

    def char_image(self, char: str) -> Glyph:
        """Return the glyph for ``char`` or raise :class:`MissingGlyphError`."""

        return self[char]


@dataclass
class _PendingGlyph:
    char: str
    kern: int
    rows: list[str] = field(default_factory=list)
    max_len: int = 0


class _FontParser:
    """State machine consuming font lines one at a time."""

    def __init__(self, *, source: str, fill: str) -> None:
        self.source = source
        self.fill = fill
        self.glyphs: dict[str, Glyph] = {}
        self._pending: _PendingGlyph | None = None
        self._line_number = 0

    def feed(self, raw_line: str) -> None:
        self._line_number += 1
        line = raw_line.rstrip("\r\n")
        if line.startswith(HEADER_PREFIX):
            char, kern = self._parse_header(line)
            self._close_pending()
            if char in self.glyphs:
                self._fail(line, f"duplicate definition for {char!r}")
            self._pending = _PendingGlyph(char=char, kern=kern)
        elif line.startswith(ROW_PREFIX):
            if self._pending is None:
                self._fail(line, "glyph row before the first header")
            text = line[len(ROW_PREFIX) :]
            if text.endswith(ROW_TERMINATOR):
                text = text[: -len(ROW_TERMINATOR)]
            text = text.replace(BLANK_MARKER, self.fill).replace(" ", self.fill)
            self._pending.rows.append(text)
            self._pending.max_len = max(self._pending.max_len, len(text))
        else:
            self._fail(line, "invalid line")

    def finish(self) -> dict[str, Glyph]:
        self._close_pending()
        return self.glyphs

    def _parse_header(self, line: str) -> tuple[str, int]:
        if len(line) < 2:
            self._fail(line, "header does not name a character")
        char = line[1]
        kern = 0
        for token in line[2:].split():
            key, sep, value = token.partition("=")
            if not sep:
                self._fail(line, f"malformed header field {token!r}, expected KEY=NUMBER")
            if key not in _HEADER_KEYS:
                self._fail(line, f"unknown header key {key!r}")
            try:
                number = int(value, 10)
            except ValueError:
                self._fail(line, f"non-numeric value {value!r} for key {key!r}")
            if key == _KERN_KEY:
                kern = number
        return char, kern

    def _close_pending(self) -> None:
        pending = self._pending
        if pending is None:
            return
        grid = GlyphGrid(pending.max_len, len(pending.rows), self.fill)
        grid.load_rows(pending.rows)
        self.glyphs[pending.char] = Glyph(char=pending.char, grid=grid, kern=pending.kern)
        self._pending = None

    def _fail(self, line: str, reason: str) -> NoReturn:
        raise ParseError(self.source, self._line_number, line, reason)


def parse_font(
    lines: Iterable[str], *, source: str = "<string>", fill: str = " "
) -> FontCatalog:
    """Build a :class:`FontCatalog` from font definition ``lines``.

    Parsing stops at the first malformed line with a :class:`ParseError`
    naming ``source`` and the 1-based line number; no partial catalog is
    returned.
    """

    if len(fill) != 1:
        raise ConfigError(f"fill must be a single character, received {fill!r}")
    parser = _FontParser(source=source, fill=fill)
    for line in lines:
        parser.feed(line)
    glyphs = parser.finish()
    logger.debug("parsed %d glyphs from %s", len(glyphs), source)
    return FontCatalog(glyphs, fill=fill, source=source)


def load_font(source: FontSource, fill: str = " ") -> FontCatalog:
    """Resolve ``source`` to lines and parse them."""

    return parse_font(source.read_lines(), source=source.describe(), fill=fill)
