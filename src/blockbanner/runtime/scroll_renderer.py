"""Render banner frames and drive the horizontal scroll loop."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Protocol

from ..banner import Banner

__all__ = [
    "CLEAR_SCREEN",
    "HELP_TEXT",
    "MAX_DELAY",
    "MIN_DELAY",
    "CancellationToken",
    "KeySource",
    "NullKeySource",
    "ScrollControl",
    "ScrollLoop",
    "ScrollState",
    "apply_control",
    "frame_text",
    "render_frame",
]

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\33[H\33[2J"
HELP_TEXT = "q quit | space pause | + faster | - slower | h help"

MIN_DELAY = 0.001
MAX_DELAY = 5.0

Emit = Callable[[str], None]


def render_frame(
    banner: Banner,
    offset: int,
    viewport_width: int,
    viewport_height: int,
    emit: Emit,
    *,
    clear_sequence: str = CLEAR_SCREEN,
) -> int:
    """Emit one frame of ``banner`` scrolled left by ``offset`` columns.

    The bottom row of the viewport is never drawn so the terminal does not
    scroll.  Columns left of the banner's start render as its fill character
    instead of wrapping around.  Returns the number of rows emitted.
    """

    for ch in clear_sequence:
        emit(ch)
    rows = max(0, min(banner.height, viewport_height - 1))
    fill = banner.fill
    for row in range(rows):
        for col in range(viewport_width):
            position = col + offset
            emit(fill if position < 0 else banner.get(position, row))
        emit("\n")
    return rows


def frame_text(
    banner: Banner,
    offset: int,
    viewport_width: int,
    viewport_height: int,
    *,
    clear_sequence: str = "",
) -> str:
    """Return the characters :func:`render_frame` would emit as one string."""

    chunks: list[str] = []
    render_frame(
        banner,
        offset,
        viewport_width,
        viewport_height,
        chunks.append,
        clear_sequence=clear_sequence,
    )
    return "".join(chunks)


class CancellationToken:
    """Cooperative stop flag shared between the loop and signal handlers."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; return early once cancelled."""

        return self._event.wait(max(0.0, timeout))


class ScrollControl(Enum):
    """Runtime commands accepted between frames."""

    QUIT = "quit"
    PAUSE = "pause"
    SPEED_UP = "speed-up"
    SPEED_DOWN = "speed-down"
    HELP = "help"


class KeySource(Protocol):
    def poll(self) -> Iterable[ScrollControl]:
        ...


class NullKeySource:
    """Key source for non-interactive runs; never yields controls."""

    def poll(self) -> list[ScrollControl]:
        return []


@dataclass
class ScrollState:
    """Mutable state owned by the scroll loop."""

    offset: int = 0
    delay: float = -1.0
    increment: int = 1
    paused: bool = False
    help_visible: bool = False
    frames: int = 0


def apply_control(
    state: ScrollState, control: ScrollControl, token: CancellationToken
) -> None:
    """Apply ``control`` to ``state``."""

    if control is ScrollControl.QUIT:
        token.cancel()
    elif control is ScrollControl.PAUSE:
        state.paused = not state.paused
    elif control is ScrollControl.SPEED_UP:
        if state.delay > 0:
            state.delay = max(MIN_DELAY, state.delay / 2)
    elif control is ScrollControl.SPEED_DOWN:
        if state.delay == 0:
            state.delay = MIN_DELAY
        elif state.delay > 0:
            state.delay = min(MAX_DELAY, state.delay * 2)
    elif control is ScrollControl.HELP:
        state.help_visible = not state.help_visible


class ScrollLoop:
    """Render ``banner`` repeatedly while advancing the scroll offset."""

    def __init__(
        self,
        banner: Banner,
        *,
        viewport_width: int,
        viewport_height: int,
        emit: Emit,
        state: ScrollState | None = None,
        keys: KeySource | None = None,
        flush: Callable[[], None] | None = None,
        clear_sequence: str = CLEAR_SCREEN,
    ) -> None:
        self.banner = banner
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.state = state if state is not None else ScrollState()
        self._emit = emit
        self._keys = keys if keys is not None else NullKeySource()
        self._flush = flush
        self._clear_sequence = clear_sequence

    def render(self) -> None:
        """Draw the current frame, plus the help line when it is toggled on."""

        state = self.state
        rows = render_frame(
            self.banner,
            state.offset,
            self.viewport_width,
            self.viewport_height,
            self._emit,
            clear_sequence=self._clear_sequence,
        )
        if state.help_visible and self.viewport_height > 0:
            # Pad down to the reserved bottom row.
            for _ in range(self.viewport_height - 1 - rows):
                self._emit("\n")
            for ch in HELP_TEXT[: max(0, self.viewport_width - 1)]:
                self._emit(ch)
        if self._flush is not None:
            self._flush()
        state.frames += 1

    def run(self, token: CancellationToken) -> ScrollState:
        """Loop until ``token`` is cancelled; a negative delay draws one frame."""

        state = self.state
        reason = "cancelled"
        while not token.cancelled:
            self.render()
            if state.delay < 0:
                reason = "single frame"
                break
            token.wait(state.delay)
            for control in self._keys.poll():
                apply_control(state, control, token)
            if not state.paused:
                self._advance()
        logger.debug("scroll loop stopped after %d frames (%s)", state.frames, reason)
        return state

    def _advance(self) -> None:
        state = self.state
        previous = state.offset
        state.offset += state.increment
        width = self.banner.width
        if width <= 0:
            return
        # An offset that starts left of the banner keeps its blank lead-in.
        if state.offset >= width or state.offset < 0 <= previous:
            state.offset %= width
