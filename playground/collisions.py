#!/usr/bin/env python3
"""
Collision handling for the particle playground.

Bodies are circles. A pair collides when the distance between centres is less
than the sum of radii. Response is a 1D impulse along the centre-to-centre
normal with a coefficient of restitution; optionally the pair is also pushed
apart by half the overlap each so it does not stay interpenetrated.

Pairs are visited in collection order (i ascending, j > i). When three or more
bodies overlap at once, each pair is resolved independently, so the result
depends on that order.
"""
import logging
import math

from .constants import MIN_DISTANCE
from .data_models import Body
from .vector_utils import clamp

logger = logging.getLogger("playground")


def overlapping(bi: Body, bj: Body) -> bool:
    dx = bj.position[0] - bi.position[0]
    dy = bj.position[1] - bi.position[1]
    r_sum = bi.radius + bj.radius
    return dx * dx + dy * dy < r_sum * r_sum


def resolve_collision(bi: Body, bj: Body, restitution: float, separate: bool = True) -> bool:
    """
    Resolve an overlapping pair.

    Returns True if an impulse was applied, False if the bodies were already
    separating (their velocities are then left untouched).
    """
    dx = bj.position[0] - bi.position[0]
    dy = bj.position[1] - bi.position[1]
    dist = math.hypot(dx, dy)

    if dist < MIN_DISTANCE:
        # Coincident centres have no defined axis
        logger.debug("Coincident bodies at %s, using fixed normal", bi.position)
        nx, ny = 1.0, 0.0
        dist = 0.0
    else:
        nx, ny = dx / dist, dy / dist

    # Relative normal velocity
    vrx = bj.velocity[0] - bi.velocity[0]
    vry = bj.velocity[1] - bi.velocity[1]
    vn = vrx * nx + vry * ny

    if vn > 0:
        # Already separating
        return False

    _apply_elastic_impulse(bi, bj, nx, ny, vn, clamp(restitution, 0.0, 1.0))

    if separate:
        half_overlap = (bi.radius + bj.radius - dist) * 0.5
        bi.position = (bi.position[0] - nx * half_overlap, bi.position[1] - ny * half_overlap)
        bj.position = (bj.position[0] + nx * half_overlap, bj.position[1] + ny * half_overlap)

    return True


def _apply_elastic_impulse(bi: Body, bj: Body, nx: float, ny: float, vn: float, e: float) -> None:
    """Apply 1D impulse along the collision normal."""
    inv_mi = 0.0 if bi.mass == 0 else 1.0 / bi.mass
    inv_mj = 0.0 if bj.mass == 0 else 1.0 / bj.mass
    denom = inv_mi + inv_mj
    if denom <= 0:
        return

    j_imp = -(1.0 + e) * vn / denom
    ix = j_imp * nx
    iy = j_imp * ny

    bi.velocity = (bi.velocity[0] - ix * inv_mi, bi.velocity[1] - iy * inv_mi)
    bj.velocity = (bj.velocity[0] + ix * inv_mj, bj.velocity[1] + iy * inv_mj)
