"""Tile color generation."""

from __future__ import annotations

import colorsys
import random
import re

HUE_JITTER = 15.0
SATURATION_RANGE = (70.0, 100.0)
LIGHTNESS_RANGE = (45.0, 65.0)

_HSL_RE = re.compile(
    r"^hsl\(\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)%\s*,\s*(\d+(?:\.\d+)?)%\s*\)$"
)


def generate_distinct_colors(
    count: int, rng: random.Random | None = None
) -> list[str]:
    """Return *count* HSL colors spread evenly around the hue wheel.

    Each hue sits at ``i * 360 / count`` plus a little jitter, with random
    saturation and lightness inside a readable band.  The list comes back
    shuffled so neighbouring numbers don't get neighbouring hues.
    """
    rng = rng or random.Random()
    step = 360 / count
    colors: list[str] = []
    for i in range(count):
        hue = (i * step + rng.uniform(-HUE_JITTER, HUE_JITTER)) % 360
        saturation = rng.uniform(*SATURATION_RANGE)
        lightness = rng.uniform(*LIGHTNESS_RANGE)
        colors.append(f"hsl({hue:.0f}, {saturation:.0f}%, {lightness:.0f}%)")
    rng.shuffle(colors)
    return colors


def parse_hsl(color: str) -> tuple[float, float, float]:
    """Return ``(hue, saturation, lightness)`` from an ``hsl(...)`` string."""
    match = _HSL_RE.match(color.strip())
    if match is None:
        raise ValueError(f"Not an hsl() color: {color!r}")
    h, s, l = (float(g) for g in match.groups())
    return h % 360, s, l


def hsl_to_rgb(color: str) -> tuple[int, int, int]:
    """Convert an ``hsl(...)`` string to 0-255 RGB channels."""
    h, s, l = parse_hsl(color)
    r, g, b = colorsys.hls_to_rgb(h / 360, l / 100, s / 100)
    return round(r * 255), round(g * 255), round(b * 255)
