"""Load and validate banner settings from TOML files and overrides."""
from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .builtin_fonts import DEFAULT_FONT
from .errors import ConfigError
from .font_catalog import EmbeddedFontSource, FileFontSource, FontSource

__all__ = [
    "BannerSettings",
    "apply_overrides",
    "default_settings",
    "load_banner_config",
]

MIN_WIDTH = 1
MIN_HEIGHT = 2
_FALLBACK_SIZE = (80, 24)


@dataclass(frozen=True)
class BannerSettings:
    """Resolved options for one banner run."""

    width: int
    height: int
    delay_ms: int = -1
    increment: int = 1
    fill: str = " "
    color: str = ""
    font: Path | None = None
    builtin_font: str | None = None
    upcase: bool = False
    enter: bool = False

    @property
    def delay(self) -> float:
        """Inter-frame delay in seconds; negative means a single frame."""

        if self.delay_ms < 0:
            return -1.0
        return self.delay_ms / 1000.0

    def font_source(self) -> FontSource:
        """Return the font source selected by these settings."""

        if self.font is not None:
            return FileFontSource(self.font)
        return EmbeddedFontSource(self.builtin_font or DEFAULT_FONT)


_SETTING_NAMES = frozenset(field.name for field in fields(BannerSettings))


def _env_dimension(environ: Mapping[str, str], name: str) -> int | None:
    raw = environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw, 10)
    except ValueError:
        return None


def default_settings(environ: Mapping[str, str] | None = None) -> BannerSettings:
    """Return defaults sized from ``COLUMNS``/``LINES`` or the terminal."""

    env = os.environ if environ is None else environ
    width = _env_dimension(env, "COLUMNS")
    height = _env_dimension(env, "LINES")
    if width is None or height is None:
        size = shutil.get_terminal_size(_FALLBACK_SIZE)
        width = size.columns if width is None else width
        height = size.lines if height is None else height
    return BannerSettings(width=width, height=height)


def load_banner_config(
    config_path: Path, *, base: BannerSettings | None = None
) -> BannerSettings:
    """Merge the ``[banner]`` table of ``config_path`` over ``base``."""

    try:
        with config_path.open("rb") as stream:
            data = tomllib.load(stream)
    except OSError as exc:
        reason = exc.strerror or str(exc)
        raise ConfigError(f"cannot open config file {config_path}: {reason}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {config_path}: {exc}") from exc

    section = _parse_banner_section(data)
    overrides = dict(section)
    raw_font = overrides.get("font")
    if raw_font is not None:
        overrides["font"] = _normalise_font_path(raw_font, base=config_path.parent)
    return apply_overrides(base or default_settings(), overrides)


def apply_overrides(
    settings: BannerSettings, overrides: Mapping[str, Any]
) -> BannerSettings:
    """Return ``settings`` updated with non-``None`` ``overrides`` and validated."""

    unknown = sorted(set(overrides) - _SETTING_NAMES)
    if unknown:
        raise ConfigError(f"unknown banner settings: {', '.join(unknown)}")
    changes = {key: value for key, value in overrides.items() if value is not None}
    if changes.get("font") is not None and changes.get("builtin_font") is None:
        changes["builtin_font"] = None
    elif changes.get("builtin_font") is not None and changes.get("font") is None:
        changes["font"] = None
    merged = replace(settings, **changes)
    validate_settings(merged)
    return merged


def validate_settings(settings: BannerSettings) -> None:
    """Raise :class:`ConfigError` when ``settings`` cannot drive a render."""

    for name in ("width", "height", "delay_ms", "increment"):
        value = getattr(settings, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{name} must be an integer, received {value!r}")
    if settings.width < MIN_WIDTH:
        raise ConfigError(f"screen width must be at least {MIN_WIDTH}, received {settings.width}")
    if settings.height < MIN_HEIGHT:
        raise ConfigError(
            f"screen height must be at least {MIN_HEIGHT}, received {settings.height}"
        )
    if not isinstance(settings.fill, str) or len(settings.fill) != 1:
        raise ConfigError(f"fill must be a single character, received {settings.fill!r}")
    if not isinstance(settings.color, str):
        raise ConfigError("color must be a string of colour letters")
    if settings.font is not None and settings.builtin_font is not None:
        raise ConfigError("font and builtin_font are mutually exclusive")
    for name in ("upcase", "enter"):
        if not isinstance(getattr(settings, name), bool):
            raise ConfigError(f"{name} must be a boolean")
    if settings.enter and settings.increment < 0:
        raise ConfigError("enter requires a non-negative increment")


def _parse_banner_section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    section = data.get("banner")
    if section is None:
        raise ConfigError("banner configuration requires a [banner] table")
    if not isinstance(section, Mapping):
        raise ConfigError("[banner] section must be a mapping")
    return section


def _normalise_font_path(raw_path: Any, *, base: Path) -> Path:
    if not isinstance(raw_path, (str, Path)):
        raise ConfigError("font must be a string path")
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = base / path
    return path
