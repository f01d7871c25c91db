"""Frame rendering and scroll loop tests."""
from __future__ import annotations

import time
from typing import Sequence

import pytest

from blockbanner.banner import Banner, compose_banner
from blockbanner.font_catalog import parse_font
from blockbanner.runtime.scroll_renderer import (
    CLEAR_SCREEN,
    HELP_TEXT,
    MAX_DELAY,
    MIN_DELAY,
    CancellationToken,
    ScrollControl,
    ScrollLoop,
    ScrollState,
    apply_control,
    frame_text,
    render_frame,
)


@pytest.fixture()
def banner() -> Banner:
    catalog = parse_font(
        ["=A", " ab", " cd", "=B", " ef", " gh"],
        fill=".",
    )
    return compose_banner("AB", catalog)


class ScriptedKeys:
    """Key source replaying ``script`` and recording the offset at each poll."""

    def __init__(self, state: ScrollState, script: Sequence[Sequence[ScrollControl]]) -> None:
        self.state = state
        self.script = list(script)
        self.offsets: list[int] = []

    def poll(self) -> list[ScrollControl]:
        self.offsets.append(self.state.offset)
        if self.script:
            return list(self.script.pop(0))
        return [ScrollControl.QUIT]


def _frames(output: str) -> list[str]:
    return [chunk for chunk in output.split(CLEAR_SCREEN) if chunk]


def test_render_frame_emits_clear_then_rows(banner: Banner) -> None:
    emitted: list[str] = []

    rows = render_frame(banner, 0, 6, 5, emitted.append)

    assert rows == 2
    text = "".join(emitted)
    assert text == CLEAR_SCREEN + "abefab\n" + "cdghcd\n"
    assert all(len(ch) == 1 for ch in emitted)


def test_render_frame_reserves_bottom_row(banner: Banner) -> None:
    assert frame_text(banner, 0, 4, 2) == "abef\n"
    assert frame_text(banner, 0, 4, 1) == ""
    assert frame_text(banner, 0, 4, 0) == ""


def test_banner_fully_offscreen_right_is_blank(banner: Banner) -> None:
    width = 7

    text = frame_text(banner, -width, width, 10)

    assert text == ("." * width + "\n") * banner.height


def test_columns_before_banner_start_are_blank(banner: Banner) -> None:
    assert frame_text(banner, -2, 6, 3) == "..abef\n..cdgh\n"


def test_offset_scrolls_left_and_tiles(banner: Banner) -> None:
    assert frame_text(banner, 1, 5, 3) == "befab\ndghcd\n"
    assert frame_text(banner, 5, 4, 3) == frame_text(banner, 1, 4, 3)


def test_empty_banner_renders_no_rows() -> None:
    empty = compose_banner("", parse_font(["=A", " #"]))

    assert frame_text(empty, 0, 3, 4, clear_sequence=CLEAR_SCREEN) == CLEAR_SCREEN


def test_single_frame_mode_renders_once(banner: Banner) -> None:
    emitted: list[str] = []
    state = ScrollState(delay=-1.0)
    keys = ScriptedKeys(state, [])
    loop = ScrollLoop(banner, viewport_width=4, viewport_height=3, emit=emitted.append, state=state, keys=keys)

    final = loop.run(CancellationToken())

    assert final.frames == 1
    assert keys.offsets == []
    assert _frames("".join(emitted)) == ["abef\ncdgh\n"]


def test_cancelled_token_renders_nothing(banner: Banner) -> None:
    emitted: list[str] = []
    token = CancellationToken()
    token.cancel()
    loop = ScrollLoop(banner, viewport_width=4, viewport_height=3, emit=emitted.append, state=ScrollState(delay=0.0))

    state = loop.run(token)

    assert state.frames == 0
    assert emitted == []


def test_loop_advances_offset_each_frame(banner: Banner) -> None:
    emitted: list[str] = []
    state = ScrollState(delay=0.0, increment=1)
    keys = ScriptedKeys(state, [[], [], []])
    loop = ScrollLoop(banner, viewport_width=3, viewport_height=2, emit=emitted.append, state=state, keys=keys)

    loop.run(CancellationToken())

    assert keys.offsets == [0, 1, 2, 3]
    assert _frames("".join(emitted)) == ["abe\n", "bef\n", "efa\n", "fab\n"]


def test_pause_freezes_offset_until_resumed(banner: Banner) -> None:
    emitted: list[str] = []
    state = ScrollState(delay=0.0)
    keys = ScriptedKeys(
        state,
        [[], [ScrollControl.PAUSE], [], [ScrollControl.PAUSE]],
    )
    loop = ScrollLoop(banner, viewport_width=3, viewport_height=2, emit=emitted.append, state=state, keys=keys)

    final = loop.run(CancellationToken())

    assert keys.offsets == [0, 1, 1, 1, 2]
    frames = _frames("".join(emitted))
    assert frames[1] == frames[2] == frames[3]
    assert final.paused is False
    assert final.frames == 5


def test_quit_finishes_current_frame(banner: Banner) -> None:
    emitted: list[str] = []
    token = CancellationToken()
    state = ScrollState(delay=0.0)
    keys = ScriptedKeys(state, [[ScrollControl.QUIT]])
    loop = ScrollLoop(banner, viewport_width=4, viewport_height=3, emit=emitted.append, state=state, keys=keys)

    final = loop.run(token)

    assert token.cancelled
    assert final.frames == 1
    assert "".join(emitted).endswith("abef\ncdgh\n")


def test_offset_wraps_after_full_banner_width(banner: Banner) -> None:
    state = ScrollState(offset=3, delay=0.0, increment=2)
    keys = ScriptedKeys(state, [[]])
    loop = ScrollLoop(banner, viewport_width=2, viewport_height=2, emit=lambda ch: None, state=state, keys=keys)

    loop.run(CancellationToken())

    assert keys.offsets == [3, 1]


def test_help_line_drawn_on_reserved_row(banner: Banner) -> None:
    emitted: list[str] = []
    state = ScrollState(delay=0.0)
    keys = ScriptedKeys(state, [[ScrollControl.HELP], [ScrollControl.HELP]])
    loop = ScrollLoop(banner, viewport_width=12, viewport_height=4, emit=emitted.append, state=state, keys=keys)

    loop.run(CancellationToken())

    frames = _frames("".join(emitted))
    assert not frames[0].endswith(HELP_TEXT[:11])
    assert frames[1] == "befabefabefa\ndghcdghcdghc\n\n" + HELP_TEXT[:11]
    assert frames[2] == "efabefabefab\nghcdghcdghcd\n"


def test_help_line_sits_on_bottom_row_of_tall_viewport(banner: Banner) -> None:
    emitted: list[str] = []
    state = ScrollState(delay=-1.0, help_visible=True)
    loop = ScrollLoop(banner, viewport_width=20, viewport_height=8, emit=emitted.append, state=state)

    loop.run(CancellationToken())

    lines = _frames("".join(emitted))[0].split("\n")
    assert len(lines) == 8
    assert lines[7] == HELP_TEXT[:19]
    assert lines[2:7] == [""] * 5


def test_flush_called_once_per_frame(banner: Banner) -> None:
    flushes: list[int] = []
    state = ScrollState(delay=0.0)
    keys = ScriptedKeys(state, [[], []])
    loop = ScrollLoop(
        banner,
        viewport_width=2,
        viewport_height=2,
        emit=lambda ch: None,
        state=state,
        keys=keys,
        flush=lambda: flushes.append(state.frames),
    )

    loop.run(CancellationToken())

    assert flushes == [0, 1, 2]


def test_speed_controls_scale_delay() -> None:
    token = CancellationToken()
    state = ScrollState(delay=0.2)

    apply_control(state, ScrollControl.SPEED_UP, token)
    assert state.delay == pytest.approx(0.1)
    apply_control(state, ScrollControl.SPEED_DOWN, token)
    apply_control(state, ScrollControl.SPEED_DOWN, token)
    assert state.delay == pytest.approx(0.4)
    assert not token.cancelled


def test_speed_controls_are_clamped() -> None:
    token = CancellationToken()
    fast = ScrollState(delay=MIN_DELAY)
    slow = ScrollState(delay=MAX_DELAY)
    stopped = ScrollState(delay=0.0)

    apply_control(fast, ScrollControl.SPEED_UP, token)
    apply_control(slow, ScrollControl.SPEED_DOWN, token)
    apply_control(stopped, ScrollControl.SPEED_DOWN, token)

    assert fast.delay == MIN_DELAY
    assert slow.delay == MAX_DELAY
    assert stopped.delay == MIN_DELAY


def test_cancellation_interrupts_wait() -> None:
    token = CancellationToken()
    token.cancel()

    started = time.monotonic()
    assert token.wait(5.0) is True
    assert time.monotonic() - started < 1.0


def test_negative_increment_wraps_after_passing_origin(banner: Banner) -> None:
    state = ScrollState(offset=1, delay=0.0, increment=-1)
    keys = ScriptedKeys(state, [[], []])
    loop = ScrollLoop(banner, viewport_width=2, viewport_height=2, emit=lambda ch: None, state=state, keys=keys)

    loop.run(CancellationToken())

    assert keys.offsets == [1, 0, 3]


def test_lead_in_offset_is_not_wrapped(banner: Banner) -> None:
    state = ScrollState(offset=-3, delay=0.0, increment=1)
    keys = ScriptedKeys(state, [[]])
    loop = ScrollLoop(banner, viewport_width=2, viewport_height=2, emit=lambda ch: None, state=state, keys=keys)

    loop.run(CancellationToken())

    assert keys.offsets == [-3, -2]
