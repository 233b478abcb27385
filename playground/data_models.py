#!/usr/bin/env python3
"""
Data models for the particle playground.

This module defines the Body dataclass shared between physics, spawning and rendering.

Units and usage
- position and radius are in surface pixels; velocity in pixels per step (uniform
  field) or pixels per scaled second (pairwise gravity).
- mass and radius are fixed once a body is spawned; position and velocity change every step.
- trail is owned by the body, so removing a body removes its history with it.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Tuple

from .constants import TRAIL_LENGTH


@dataclass(eq=False)
class Body:
    """
    A simulated particle.

    Fields:
    - mass: Mass in model units (already scaled for pairwise gravity)
    - radius: Collision/visual radius, derived from mass at spawn
    - position: 2D position (x, y)
    - velocity: 2D velocity (vx, vy)
    - color: RGB tuple used for rendering only
    - trail: Bounded deque of past positions, oldest first
    """
    mass: float
    radius: float
    position: Tuple[float, float]
    velocity: Tuple[float, float]
    color: Tuple[int, int, int] = (200, 200, 255)
    trail: Deque[Tuple[float, float]] = field(default_factory=lambda: deque(maxlen=TRAIL_LENGTH))

    def add_trail_point(self) -> None:
        """Append the current position to the trail."""
        self.trail.append(self.position)
