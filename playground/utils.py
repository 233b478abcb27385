#!/usr/bin/env python3
"""
General utilities for the particle playground.
"""
import colorsys
import random
from typing import Optional, Tuple

from .constants import SPAWN_LIGHTNESS, SPAWN_SATURATION


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def hsl_color(hue_degrees: float, saturation: float = SPAWN_SATURATION,
              lightness: float = SPAWN_LIGHTNESS) -> Tuple[int, int, int]:
    """Convert an HSL colour (hue in degrees, s/l in 0..1) to an RGB tuple in 0..255."""
    r, g, b = colorsys.hls_to_rgb((hue_degrees % 360.0) / 360.0, lightness, saturation)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def random_color(rng: random.Random) -> Tuple[int, int, int]:
    return hsl_color(rng.random() * 360.0)
