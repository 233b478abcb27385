#!/usr/bin/env python3
"""
Read-only views of simulation state for renderers.

A renderer receives a FrameSnapshot once per frame and draws from it. The
snapshot copies positions, velocities and trails, so nothing a renderer does
can reach back into the physics.
"""
from dataclasses import dataclass
from typing import Tuple

from .data_models import Body

Point = Tuple[float, float]


@dataclass(frozen=True)
class BodyView:
    position: Point
    velocity: Point
    radius: float
    color: Tuple[int, int, int]
    trail: Tuple[Point, ...]

    @classmethod
    def of(cls, body: Body) -> "BodyView":
        return cls(
            position=body.position,
            velocity=body.velocity,
            radius=body.radius,
            color=body.color,
            trail=tuple(body.trail),
        )


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything needed to draw one frame."""
    bodies: Tuple[BodyView, ...]
    bounds: Tuple[float, float]
    paused: bool
    show_trails: bool
    show_vectors: bool
    show_grid: bool
    model_name: str
    background: Tuple[int, int, int]

    @property
    def body_count(self) -> int:
        return len(self.bodies)
