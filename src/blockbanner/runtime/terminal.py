"""Terminal glue: output sinks, ANSI colours and keyboard polling."""
from __future__ import annotations

import contextlib
import os
from types import TracebackType
from typing import IO, Callable, Iterable

if os.name == "nt":  # pragma: no cover - exercised via Windows CI
    import msvcrt
else:  # pragma: no cover - exercised via Unix CI
    import select
    import termios
    import tty

from .scroll_renderer import NullKeySource, ScrollControl

__all__ = [
    "COLOR_RESET",
    "KEY_BINDINGS",
    "TerminalKeySource",
    "color_sequence",
    "controls_for_keys",
    "open_key_source",
    "parse_color",
    "stream_sink",
]

COLOR_RESET = "\33[m"

_COLOR_CODES: dict[str, int] = {
    "k": 30,  # black
    "r": 31,  # red
    "g": 32,  # green
    "y": 33,  # yellow
    "b": 34,  # blue
    "m": 35,  # magenta
    "c": 36,  # cyan
    "w": 37,  # white
    "K": 90,
    "R": 91,
    "G": 92,
    "Y": 93,
    "B": 94,
    "M": 95,
    "C": 96,
    "W": 97,
}
_BACKGROUND_SHIFT = 10

KEY_BINDINGS: dict[str, ScrollControl] = {
    "q": ScrollControl.QUIT,
    "Q": ScrollControl.QUIT,
    "\x1b": ScrollControl.QUIT,
    " ": ScrollControl.PAUSE,
    "p": ScrollControl.PAUSE,
    "+": ScrollControl.SPEED_UP,
    "=": ScrollControl.SPEED_UP,
    "f": ScrollControl.SPEED_UP,
    "-": ScrollControl.SPEED_DOWN,
    "_": ScrollControl.SPEED_DOWN,
    "s": ScrollControl.SPEED_DOWN,
    "h": ScrollControl.HELP,
    "?": ScrollControl.HELP,
}


def parse_color(letter: str) -> int:
    """Return the ANSI foreground code for ``letter`` or ``0`` when unknown."""

    return _COLOR_CODES.get(letter, 0)


def color_sequence(color: str) -> str:
    """Translate ``color`` (foreground letter, optional background letter).

    An empty string yields the reset sequence.
    """

    if not color:
        return COLOR_RESET
    parts: list[str] = []
    foreground = parse_color(color[0])
    if foreground:
        parts.append(f"\33[{foreground}m")
    if len(color) > 1:
        background = parse_color(color[1])
        if background:
            parts.append(f"\33[{background + _BACKGROUND_SHIFT}m")
    return "".join(parts)


def stream_sink(stream: IO[str]) -> tuple[Callable[[str], None], Callable[[], None]]:
    """Return ``(emit, flush)`` callables writing to ``stream``."""

    return stream.write, stream.flush


def controls_for_keys(keys: Iterable[str]) -> list[ScrollControl]:
    """Map raw key characters to controls, dropping unbound keys."""

    return [KEY_BINDINGS[key] for key in keys if key in KEY_BINDINGS]


class TerminalKeySource(contextlib.AbstractContextManager["TerminalKeySource"]):
    """Non-blocking keyboard reader that puts a TTY into cbreak mode."""

    _READ_SIZE = 64

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._saved_attrs: list | None = None

    def __enter__(self) -> "TerminalKeySource":
        if os.name != "nt":
            fd = self._stream.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        if self._saved_attrs is not None:
            termios.tcsetattr(self._stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
        return False

    def poll(self) -> list[ScrollControl]:
        return controls_for_keys(self._read_pending())

    def _read_pending(self) -> str:
        if os.name == "nt":  # pragma: no cover - Windows only
            chars: list[str] = []
            while msvcrt.kbhit():
                chars.append(msvcrt.getwch())
            return "".join(chars)
        fd = self._stream.fileno()
        chunks: list[bytes] = []
        while select.select([fd], [], [], 0)[0]:
            data = os.read(fd, self._READ_SIZE)
            if not data:
                break
            chunks.append(data)
        return b"".join(chunks).decode("utf-8", errors="ignore")


def open_key_source(
    stream: IO[str],
) -> contextlib.AbstractContextManager[TerminalKeySource | NullKeySource]:
    """Return a context manager yielding a key source suited to ``stream``."""

    isatty = getattr(stream, "isatty", None)
    if callable(isatty) and isatty():
        return TerminalKeySource(stream)
    return contextlib.nullcontext(NullKeySource())
