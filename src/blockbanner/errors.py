"""Error taxonomy shared by the font, banner and runtime layers."""
from __future__ import annotations

__all__ = [
    "BannerError",
    "ConfigError",
    "MissingGlyphError",
    "ParseError",
]


class BannerError(Exception):
    """Base class for failures that abort a render attempt."""


class ConfigError(BannerError, ValueError):
    """Raised when settings or a font source cannot be used."""


class ParseError(BannerError, ValueError):
    """Raised when a font definition contains a malformed line."""

    def __init__(self, source: str, line_number: int, line: str, reason: str) -> None:
        self.source = source
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"{source}:{line_number}: {reason}: {line!r}")


class MissingGlyphError(BannerError, KeyError):
    """Raised when a message uses a character the font does not define."""

    def __init__(self, char: str, source: str | None = None) -> None:
        self.char = char
        self.source = source
        super().__init__(char)

    def __str__(self) -> str:
        where = f" {self.source}" if self.source else ""
        return f"character {self.char!r} not in font{where}"
