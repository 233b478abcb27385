#!/usr/bin/env python3
"""
Force models for the particle playground.

Responsibilities
- Decide the timestep of one simulation step.
- Apply per-body field forces (uniform downward gravity, air resistance).
- Apply pairwise Newtonian attraction between non-overlapping bodies.
- Keep bodies inside the drawing surface where the model has walls.
- Describe how a spawned body gets its mass, radius and launch speed.

Two variants share one pipeline (see playground.simulation):

UniformField
    Per-frame units (dt = 1). Every body accelerates downward by `gravity` each
    step and bounces off the surface edges, losing energy by `bounce`.

PairwiseGravity
    dt = 0.016 * time_scale. Every unordered pair attracts with
    F = G * m1 * m2 / d^2; there are no walls.

Numerical notes
- Squared distance is clamped to MIN_DISTANCE^2 before dividing, so coincident
  bodies never produce inf/NaN.
- Complexity: the pair pass is O(N^2) direct summation.
"""
import logging
import math
from typing import Dict, Type

from .constants import (
    BASE_DT,
    GRAVITY_MASS_SCALE,
    LAUNCH_SCALE,
    LAUNCH_VELOCITY_REFERENCE,
    MIN_DISTANCE,
    MIN_RADIUS,
)
from .data_models import Body

logger = logging.getLogger("playground")


class ForceModel:
    """
    Base class for a physics variant.

    Subclasses override the hooks they need; the defaults do nothing so a model
    only pays for the forces it actually has.
    """
    name = "base"
    pairwise = False  # apply_pair is called for non-overlapping pairs
    separates_on_collision = True  # push overlapping pairs apart after the impulse
    requires_launch_point = False  # spawn() needs an end point

    def timestep(self, state) -> float:
        return 1.0

    def apply_pair(self, bi: Body, bj: Body, dt: float, state) -> None:
        pass

    def apply_field(self, body: Body, dt: float, state) -> None:
        pass

    def constrain(self, body: Body, state) -> None:
        pass

    def body_mass(self, mass_setting: float) -> float:
        return float(mass_setting)

    def radius_for_mass(self, mass: float) -> float:
        raise NotImplementedError

    def launch_scale(self, state) -> float:
        return LAUNCH_SCALE

    def __repr__(self):
        return f"{type(self).__name__}()"


class UniformField(ForceModel):
    """Constant downward acceleration with lossy wall bounces."""
    name = "uniform"

    def apply_field(self, body: Body, dt: float, state) -> None:
        vx, vy = body.velocity
        vy += state.gravity * dt
        if state.air_resistance:
            damping = max(0.0, 1.0 - state.air_resistance)
            vx *= damping
            vy *= damping
        body.velocity = (vx, vy)

    def constrain(self, body: Body, state) -> None:
        """
        Reflect a body whose leading edge crossed a surface edge.

        Each axis is handled independently: the position is clamped so the edge
        touches the boundary and the velocity component is pointed back inward,
        scaled by `bounce`.
        """
        width, height = state.bounds
        x, y = body.position
        vx, vy = body.velocity
        r = body.radius
        bounce = state.bounce

        if x - r < 0:
            x = r
            vx = abs(vx) * bounce
        elif x + r > width:
            x = width - r
            vx = -abs(vx) * bounce

        if y - r < 0:
            y = r
            vy = abs(vy) * bounce
        elif y + r > height:
            y = height - r
            vy = -abs(vy) * bounce

        body.position = (x, y)
        body.velocity = (vx, vy)

    def radius_for_mass(self, mass: float) -> float:
        return math.sqrt(mass) * 2.0

    def launch_scale(self, state) -> float:
        return LAUNCH_SCALE * state.velocity / LAUNCH_VELOCITY_REFERENCE


class PairwiseGravity(ForceModel):
    """
    Newtonian attraction between every pair of bodies.

    The force between two bodies is:
    F = G * m1 * m2 / d^2

    decomposed along the angle between their centres. Each body's velocity
    changes by F / m * dt, in opposite directions. Overlapping pairs are handed
    to the collision resolver instead and feel no force that step; the resolver
    only changes velocities here, so the next position update separates them.
    """
    name = "gravity"
    pairwise = True
    separates_on_collision = False
    requires_launch_point = True

    def timestep(self, state) -> float:
        return BASE_DT * state.time_scale

    def apply_pair(self, bi: Body, bj: Body, dt: float, state) -> None:
        dx = bj.position[0] - bi.position[0]
        dy = bj.position[1] - bi.position[1]
        dist_sq = dx * dx + dy * dy
        if dist_sq < MIN_DISTANCE * MIN_DISTANCE:
            logger.debug("Clamping pair distance %.3g to %.3g", math.sqrt(dist_sq), MIN_DISTANCE)
            dist_sq = MIN_DISTANCE * MIN_DISTANCE

        force = state.G * bi.mass * bj.mass / dist_sq
        angle = math.atan2(dy, dx)
        fx = force * math.cos(angle)
        fy = force * math.sin(angle)

        bi.velocity = (bi.velocity[0] + fx / bi.mass * dt, bi.velocity[1] + fy / bi.mass * dt)
        bj.velocity = (bj.velocity[0] - fx / bj.mass * dt, bj.velocity[1] - fy / bj.mass * dt)

    def body_mass(self, mass_setting: float) -> float:
        return float(mass_setting) * GRAVITY_MASS_SCALE

    def radius_for_mass(self, mass: float) -> float:
        return max(math.log(mass) * 0.5, MIN_RADIUS)


FORCE_MODELS: Dict[str, Type[ForceModel]] = {
    UniformField.name: UniformField,
    PairwiseGravity.name: PairwiseGravity,
}


def make_force_model(name: str) -> ForceModel:
    """Instantiate a force model by name ("uniform" or "gravity")."""
    try:
        return FORCE_MODELS[name]()
    except KeyError:
        raise ValueError(f"Unknown force model: {name!r} (expected one of {sorted(FORCE_MODELS)})") from None
