"""
Board settings: command-line values, YAML settings files and step-size policy.

A settings file is a flat YAML mapping, e.g.:

    width: 20
    height: 15
    threshold: 120
    invert: true
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

DEFAULT_WIDTH = 16
DEFAULT_THRESHOLD = 100

_SETTINGS_KEYS = ("width", "height", "threshold", "invert")
_UINT_RE = re.compile(r"\+?[0-9]+")


class BoardConfigError(ValueError):
    """Invalid board dimensions, step sizes or settings file."""


@dataclass(frozen=True)
class BoardSettings:
    width: int | None = None
    height: int | None = None
    threshold: int = DEFAULT_THRESHOLD
    invert: bool = False


# ── value parsing ──────────────────────────────────────────────────────────

def parse_dimension(text: str, *, name: str = "width") -> int:
    """Parse a board width/height. Must be a positive integer."""
    raw = str(text)
    if not _UINT_RE.fullmatch(raw):
        raise BoardConfigError(f"Invalid value for {name}: {text!r}")
    value = int(raw)
    if value < 1:
        raise BoardConfigError(f"Invalid value for {name}: {text!r} (must be at least 1)")
    return value


def parse_threshold(text: str | None) -> int:
    """
    Parse an 8-bit threshold.

    Anything that is not an integer in 0..255 falls back to DEFAULT_THRESHOLD
    instead of failing.
    """
    if text is None:
        return DEFAULT_THRESHOLD
    raw = str(text)
    if not _UINT_RE.fullmatch(raw):
        return DEFAULT_THRESHOLD
    value = int(raw)
    if value > 255:
        return DEFAULT_THRESHOLD
    return value


# ── step sizes ─────────────────────────────────────────────────────────────

def resolve_step_sizes(
    img_width: int,
    img_height: int,
    width: int | None = None,
    height: int | None = None,
) -> tuple[int, int]:
    """
    Return (x_step, y_step) in source pixels for the requested board size.

    Only one dimension given: the same step is used on both axes, so cells
    stay square. Neither given: DEFAULT_WIDTH columns, square cells.
    """
    for name, value in (("width", width), ("height", height)):
        if value is not None and value < 1:
            raise BoardConfigError(f"Invalid value for {name}: {value} (must be at least 1)")

    if width is None and height is None:
        step = img_width // DEFAULT_WIDTH
        x_step, y_step = step, step
    elif height is None:
        step = img_width // width
        x_step, y_step = step, step
    elif width is None:
        step = img_height // height
        x_step, y_step = step, step
    else:
        x_step, y_step = img_width // width, img_height // height

    if x_step < 1 or y_step < 1:
        raise BoardConfigError(
            f"Board size too large for a {img_width}x{img_height} image "
            f"(step size {x_step}x{y_step}); every cell needs at least one pixel"
        )
    return x_step, y_step


# ── settings files ─────────────────────────────────────────────────────────

def settings_from_mapping(data: dict) -> BoardSettings:
    unknown = sorted(set(data) - set(_SETTINGS_KEYS))
    if unknown:
        raise BoardConfigError(f"Unknown settings key(s): {', '.join(unknown)}")

    width = data.get("width")
    height = data.get("height")
    invert = data.get("invert", False)
    if not isinstance(invert, bool):
        raise BoardConfigError(f"invert must be true or false, got {invert!r}")

    return BoardSettings(
        width=None if width is None else parse_dimension(width, name="width"),
        height=None if height is None else parse_dimension(height, name="height"),
        threshold=parse_threshold(data.get("threshold")),
        invert=invert,
    )


def load_board_config(path: Path) -> BoardSettings:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise BoardConfigError(f"Settings file not found: {path}") from None
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise BoardConfigError(f"Settings file {path} is not valid YAML: {exc}") from exc
    if data is None:
        return BoardSettings()
    if not isinstance(data, dict):
        raise BoardConfigError("Settings file must be a mapping at the top level")
    return settings_from_mapping(data)


def merge_settings(base: BoardSettings, **overrides) -> BoardSettings:
    """Apply command-line values on top of `base`. None means "not given"."""
    given = {k: v for k, v in overrides.items() if v is not None}
    unknown = sorted(set(given) - set(_SETTINGS_KEYS))
    if unknown:
        raise TypeError(f"Unknown setting(s): {', '.join(unknown)}")
    return replace(base, **given)
