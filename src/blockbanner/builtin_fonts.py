"""Font definitions shipped with the package so no font file is required."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence

__all__ = ["BUILTIN_FONTS", "DEFAULT_FONT", "builtin_font_names", "get_builtin_font"]

DEFAULT_FONT = "block"

_BLOCK_KERN = 1
_BLOCK_SPACE_ADVANCE = 4

_BLOCK_GLYPHS: dict[str, tuple[str, ...]] = {
    "A": (" ### ", "#   #", "#####", "#   #", "#   #"),
    "B": ("#### ", "#   #", "#### ", "#   #", "#### "),
    "C": (" ####", "#    ", "#    ", "#    ", " ####"),
    "D": ("#### ", "#   #", "#   #", "#   #", "#### "),
    "E": ("#####", "#    ", "#### ", "#    ", "#####"),
    "F": ("#####", "#    ", "#### ", "#    ", "#    "),
    "G": (" ####", "#    ", "#  ##", "#   #", " ####"),
    "H": ("#   #", "#   #", "#####", "#   #", "#   #"),
    "I": ("###", " # ", " # ", " # ", "###"),
    "J": ("  ###", "   # ", "   # ", "#  # ", " ##  "),
    "K": ("#   #", "#  # ", "###  ", "#  # ", "#   #"),
    "L": ("#    ", "#    ", "#    ", "#    ", "#####"),
    "M": ("#   #", "## ##", "# # #", "#   #", "#   #"),
    "N": ("#   #", "##  #", "# # #", "#  ##", "#   #"),
    "O": (" ### ", "#   #", "#   #", "#   #", " ### "),
    "P": ("#### ", "#   #", "#### ", "#    ", "#    "),
    "Q": (" ### ", "#   #", "# # #", "#  # ", " ## #"),
    "R": ("#### ", "#   #", "#### ", "#  # ", "#   #"),
    "S": (" ####", "#    ", " ### ", "    #", "#### "),
    "T": ("#####", "  #  ", "  #  ", "  #  ", "  #  "),
    "U": ("#   #", "#   #", "#   #", "#   #", " ### "),
    "V": ("#   #", "#   #", "#   #", " # # ", "  #  "),
    "W": ("#   #", "#   #", "# # #", "## ##", "#   #"),
    "X": ("#   #", " # # ", "  #  ", " # # ", "#   #"),
    "Y": ("#   #", " # # ", "  #  ", "  #  ", "  #  "),
    "Z": ("#####", "   # ", "  #  ", " #   ", "#####"),
    "0": (" ### ", "#  ##", "# # #", "##  #", " ### "),
    "1": (" # ", "## ", " # ", " # ", "###"),
    "2": (" ### ", "#   #", "  ## ", " #   ", "#####"),
    "3": ("#### ", "    #", " ### ", "    #", "#### "),
    "4": ("#   #", "#   #", "#####", "    #", "    #"),
    "5": ("#####", "#    ", "#### ", "    #", "#### "),
    "6": (" ### ", "#    ", "#### ", "#   #", " ### "),
    "7": ("#####", "    #", "   # ", "  #  ", "  #  "),
    "8": (" ### ", "#   #", " ### ", "#   #", " ### "),
    "9": (" ### ", "#   #", " ####", "    #", " ### "),
    "!": ("#", "#", "#", " ", "#"),
    "?": ("### ", "   #", " ## ", "    ", " #  "),
    ".": (" ", " ", " ", " ", "#"),
    ",": ("  ", "  ", "  ", " #", "# "),
    ":": (" ", "#", " ", "#", " "),
    "'": ("#", "#", " ", " ", " "),
    "-": ("    ", "    ", "####", "    ", "    "),
    "/": ("    #", "   # ", "  #  ", " #   ", "#    "),
}


def _with_lower_case(glyphs: Mapping[str, Sequence[str]]) -> dict[str, Sequence[str]]:
    """Return ``glyphs`` plus lower-case letters drawn like their capitals."""

    extended = dict(glyphs)
    for char, rows in glyphs.items():
        if char.isalpha() and char.lower() not in extended:
            extended[char.lower()] = rows
    return extended


def _render_definition(
    glyphs: Mapping[str, Sequence[str]], *, kern: int, space_advance: int
) -> str:
    """Serialise ``glyphs`` using the same text format font files use."""

    # Rows end with the '@' terminator so trailing blanks survive.
    lines = [f"= k={space_advance}"]
    for char, rows in glyphs.items():
        lines.append(f"={char} k={kern}")
        lines.extend(f" {row}@" for row in rows)
    return "\n".join(lines) + "\n"


BUILTIN_FONTS: Mapping[str, str] = MappingProxyType(
    {
        "block": _render_definition(
            _with_lower_case(_BLOCK_GLYPHS),
            kern=_BLOCK_KERN,
            space_advance=_BLOCK_SPACE_ADVANCE,
        ),
    }
)


def builtin_font_names() -> list[str]:
    return sorted(BUILTIN_FONTS)


def get_builtin_font(name: str) -> str:
    """Return the definition text for the built-in font ``name``.

    Raises ``KeyError`` when no such font is bundled.
    """

    return BUILTIN_FONTS[name]
