#!/usr/bin/env python3
"""
Turning drag gestures into bodies.

A drag from `start` to `end` launches a body at `start` with velocity
`(end - start) * launch_scale`. Without an end point the uniform field picks a
random velocity in [-velocity/2, velocity/2] per axis; pairwise gravity needs
the end point.
"""
import logging
import random
from typing import List, Optional, Tuple

from .constants import PREVIEW_STEPS
from .data_models import Body
from .forces import ForceModel
from .utils import random_color
from .vector_utils import Vec2, vec_scale, vec_sub

logger = logging.getLogger("playground")


def launch_velocity(model: ForceModel, state, start: Vec2, end: Optional[Vec2],
                    rng: random.Random) -> Tuple[float, float]:
    if end is not None:
        return vec_scale(vec_sub(end, start), model.launch_scale(state))
    if model.requires_launch_point:
        raise ValueError(f"{model.name} model needs an end point to launch a body")
    v = state.velocity
    return ((rng.random() - 0.5) * v, (rng.random() - 0.5) * v)


def make_body(model: ForceModel, state, start: Vec2, end: Optional[Vec2],
              rng: random.Random) -> Body:
    """Create a body at `start`; mass, radius and colour are fixed here for its lifetime."""
    if state.mass <= 0:
        raise ValueError(f"Mass must be positive, got {state.mass}")
    velocity = launch_velocity(model, state, start, end, rng)
    mass = model.body_mass(state.mass)
    body = Body(
        mass=mass,
        radius=model.radius_for_mass(mass),
        position=(float(start[0]), float(start[1])),
        velocity=velocity,
        color=random_color(rng),
    )
    logger.debug("Spawned body mass=%.4g radius=%.2f pos=%s vel=%s",
                 body.mass, body.radius, body.position, body.velocity)
    return body


def predict_trajectory(model: ForceModel, state, start: Vec2, end: Vec2,
                       steps: int = PREVIEW_STEPS) -> List[Tuple[float, float]]:
    """
    Path a body launched by this drag would follow if nothing else were present.

    The uniform field applies gravity every step; pairwise gravity has no
    single-body force, so its preview is a straight line. The start point is
    included, so the result has steps + 1 points.
    """
    vx, vy = vec_scale(vec_sub(end, start), model.launch_scale(state))
    x, y = float(start[0]), float(start[1])
    points = [(x, y)]
    dt = model.timestep(state)
    for _ in range(steps):
        if model.pairwise:
            x += vx * dt
            y += vy * dt
        else:
            vy += state.gravity
            x += vx
            y += vy
        points.append((x, y))
    return points
