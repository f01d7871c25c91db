"""Scroll a message across the terminal in large block letters."""

from __future__ import annotations

import argparse
import contextlib
import logging
import signal
import sys
from pathlib import Path
from typing import IO, Iterator, Mapping, Sequence

from ..banner import Banner, compose_banner
from ..banner_config import (
    BannerSettings,
    apply_overrides,
    default_settings,
    load_banner_config,
)
from ..builtin_fonts import builtin_font_names
from ..errors import BannerError
from ..font_catalog import load_font
from .scroll_renderer import (
    CLEAR_SCREEN,
    CancellationToken,
    KeySource,
    ScrollLoop,
    ScrollState,
)
from .terminal import COLOR_RESET, color_sequence, open_key_source, stream_sink

logger = logging.getLogger(__name__)

_PROG = "blockbanner"


def _single_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError("expected exactly one character")
    return value


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed arguments for the banner CLI."""

    # -h selects the screen height, so help is only reachable as --help.
    parser = argparse.ArgumentParser(prog=_PROG, description=__doc__, add_help=False)
    parser.add_argument(
        "--help", action="help", help="Show this message and exit"
    )
    parser.add_argument(
        "-c",
        "--color",
        default=None,
        help="Colour letters: foreground then optional background (krgybmcw, upper case for bright)",
    )
    parser.add_argument(
        "-d",
        "--delay",
        dest="delay_ms",
        type=int,
        default=None,
        help="Milliseconds between frames; negative renders a single frame",
    )
    font_group = parser.add_mutually_exclusive_group()
    font_group.add_argument(
        "-f",
        "--font-file",
        dest="font",
        type=Path,
        default=None,
        help="Path to a font definition file",
    )
    font_group.add_argument(
        "-b",
        "--builtin-font",
        dest="builtin_font",
        choices=builtin_font_names(),
        default=None,
        help="Name of a bundled font (default: block)",
    )
    parser.add_argument(
        "-F",
        "--fill",
        type=_single_char,
        default=None,
        help="Background fill character",
    )
    parser.add_argument(
        "-h",
        "--height",
        type=int,
        default=None,
        help="Screen height in rows (default: $LINES)",
    )
    parser.add_argument(
        "-i",
        "--increment",
        type=int,
        default=None,
        help="Columns to scroll per frame",
    )
    parser.add_argument(
        "-w",
        "--width",
        type=int,
        default=None,
        help="Screen width in columns (default: $COLUMNS)",
    )
    parser.add_argument(
        "-u",
        "--upcase",
        action="store_true",
        default=None,
        help="Convert the message to upper case before rendering",
    )
    parser.add_argument(
        "-e",
        "--enter",
        action="store_true",
        default=None,
        help="Start with the banner just beyond the right edge",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML file with a [banner] table",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostics to stderr",
    )
    parser.add_argument("message", nargs="+", help="Words of the message")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def resolve_settings(
    args: argparse.Namespace, *, environ: Mapping[str, str] | None = None
) -> BannerSettings:
    """Combine defaults, the optional config file and command-line flags."""

    settings = default_settings(environ)
    if args.config is not None:
        settings = load_banner_config(args.config, base=settings)
    overrides = {
        "width": args.width,
        "height": args.height,
        "delay_ms": args.delay_ms,
        "increment": args.increment,
        "fill": args.fill,
        "color": args.color,
        "font": args.font,
        "builtin_font": args.builtin_font,
        "upcase": args.upcase,
        "enter": args.enter,
    }
    return apply_overrides(settings, overrides)


def build_banner(message: str, settings: BannerSettings) -> Banner:
    """Load the configured font and compose ``message`` with it."""

    catalog = load_font(settings.font_source(), fill=settings.fill)
    if settings.upcase:
        message = message.upper()
    return compose_banner(message, catalog)


@contextlib.contextmanager
def _cancel_on_interrupt(token: CancellationToken) -> Iterator[None]:
    def _handler(signum: int, frame: object) -> None:
        token.cancel()

    try:
        previous = signal.signal(signal.SIGINT, _handler)
    except ValueError:  # pragma: no cover - not running in the main thread
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def run_banner(
    banner: Banner,
    settings: BannerSettings,
    *,
    output_stream: IO[str],
    keys: KeySource | None = None,
    token: CancellationToken | None = None,
) -> ScrollState:
    """Scroll ``banner`` on ``output_stream`` until cancelled."""

    token = token if token is not None else CancellationToken()
    emit, flush = stream_sink(output_stream)
    state = ScrollState(
        offset=-settings.width if settings.enter else 0,
        delay=settings.delay,
        increment=settings.increment,
    )
    loop = ScrollLoop(
        banner,
        viewport_width=settings.width,
        viewport_height=settings.height,
        emit=emit,
        state=state,
        keys=keys,
        flush=flush,
    )
    emit(color_sequence(settings.color))
    try:
        return loop.run(token)
    finally:
        emit(COLOR_RESET)
        if settings.delay >= 0:
            emit(CLEAR_SCREEN)
        flush()


def main(
    argv: Sequence[str] | None = None,
    *,
    output_stream: IO[str] | None = None,
    input_stream: IO[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Entry point for the ``blockbanner`` command."""

    args = parse_args(argv)
    _configure_logging(args.verbose)
    output_stream = output_stream if output_stream is not None else sys.stdout
    input_stream = input_stream if input_stream is not None else sys.stdin
    message = " ".join(args.message)
    try:
        settings = resolve_settings(args, environ=environ)
        banner = build_banner(message, settings)
    except BannerError as exc:
        print(f"{_PROG}: {exc}", file=sys.stderr)
        return 1

    token = CancellationToken()
    if settings.delay >= 0:
        key_cm = open_key_source(input_stream)
    else:
        key_cm = contextlib.nullcontext(None)
    with _cancel_on_interrupt(token), key_cm as keys:
        state = run_banner(
            banner, settings, output_stream=output_stream, keys=keys, token=token
        )
    logger.debug("rendered %d frames, final offset %d", state.frames, state.offset)
    return 0


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main())


__all__ = [
    "build_banner",
    "main",
    "parse_args",
    "resolve_settings",
    "run_banner",
]
