#!/usr/bin/env python3
"""
Simulation state and the operations the front-end calls.

Frame model
- The host calls tick() (or step() then its own render) once per frame.
- step() is a no-op while paused; rendering still happens.
- Setters write straight into SimulationState and take effect on the next step.
- Everything runs on one thread, so no locking is involved.

Step pipeline (shared by both force models)
1) Pair pass, i ascending, j > i: overlapping pairs go to the collision
   resolver; other pairs get the model's pairwise force, if it has one.
2) Per body: field force, position += velocity * dt, trail point, wall constraint.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .collisions import overlapping, resolve_collision
from .constants import (
    BACKGROUND_THEMES,
    DEFAULT_AIR_RESISTANCE,
    DEFAULT_BACKGROUND_THEME,
    DEFAULT_BOUNCE,
    DEFAULT_GRAVITY,
    DEFAULT_MASS,
    DEFAULT_RESTITUTION,
    DEFAULT_TIME_SCALE,
    DEFAULT_VELOCITY,
    G0,
    GRAVITY_PRESETS,
    SPAWN_BODY_OFFSET,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .data_models import Body
from .forces import ForceModel, UniformField, make_force_model
from .render import BodyView, FrameSnapshot
from .spawn import make_body, predict_trajectory
from .vector_utils import Vec2, vec_add

logger = logging.getLogger("playground")


@dataclass
class SimulationState:
    """Mutable state owned by a Simulation."""
    bodies: List[Body] = field(default_factory=list)
    paused: bool = False
    show_trails: bool = True
    show_vectors: bool = False
    show_grid: bool = False
    background_theme: str = DEFAULT_BACKGROUND_THEME
    bounds: Tuple[float, float] = (float(VIEW_WIDTH), float(VIEW_HEIGHT))

    # Tunables
    mass: float = DEFAULT_MASS
    velocity: float = DEFAULT_VELOCITY
    gravity: float = DEFAULT_GRAVITY
    bounce: float = DEFAULT_BOUNCE
    restitution: float = DEFAULT_RESTITUTION
    air_resistance: float = DEFAULT_AIR_RESISTANCE
    G: float = G0
    gravity_preset: str = "normal"
    time_scale: float = DEFAULT_TIME_SCALE


def _finite(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value}")
    return value


def _non_negative(name: str, value: float) -> float:
    value = _finite(name, value)
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _unit_interval(name: str, value: float) -> float:
    value = _non_negative(name, value)
    if value > 1:
        raise ValueError(f"{name} must be <= 1, got {value}")
    return value


class Simulation:
    """
    The particle playground core.

    Owns the body collection and the active force model, and exposes spawn,
    step/tick, reset, pause and the parameter setters used by the controls.
    """

    def __init__(self, model: Optional[ForceModel] = None, state: Optional[SimulationState] = None,
                 rng: Optional[random.Random] = None):
        self.model = model if model is not None else UniformField()
        self.state = state if state is not None else SimulationState()
        self.rng = rng if rng is not None else random.Random()
        self.collisions_resolved = 0

    # -----------------------
    # Read accessors
    # -----------------------

    @property
    def bodies(self) -> List[Body]:
        return self.state.bodies

    @property
    def paused(self) -> bool:
        return self.state.paused

    @property
    def show_trails(self) -> bool:
        return self.state.show_trails

    @property
    def show_vectors(self) -> bool:
        return self.state.show_vectors

    @property
    def show_grid(self) -> bool:
        return self.state.show_grid

    def bodies_snapshot(self) -> List[BodyView]:
        return [BodyView.of(b) for b in self.state.bodies]

    def trail_for(self, body: Body) -> Tuple[Tuple[float, float], ...]:
        return tuple(body.trail)

    def frame(self) -> FrameSnapshot:
        s = self.state
        return FrameSnapshot(
            bodies=tuple(self.bodies_snapshot()),
            bounds=s.bounds,
            paused=s.paused,
            show_trails=s.show_trails,
            show_vectors=s.show_vectors,
            show_grid=s.show_grid,
            model_name=self.model.name,
            background=BACKGROUND_THEMES[s.background_theme],
        )

    # -----------------------
    # Spawning
    # -----------------------

    def spawn(self, start: Vec2, end: Optional[Vec2] = None) -> Body:
        body = make_body(self.model, self.state, start, end, self.rng)
        self.state.bodies.append(body)
        return body

    def spawn_body(self) -> Body:
        """Launch a body from the surface centre, as if dragged 100px to the right."""
        w, h = self.state.bounds
        centre = (w / 2, h / 2)
        return self.spawn(centre, vec_add(centre, SPAWN_BODY_OFFSET))

    def predict_trajectory(self, start: Vec2, end: Vec2) -> List[Tuple[float, float]]:
        return predict_trajectory(self.model, self.state, start, end)

    # -----------------------
    # Stepping
    # -----------------------

    def step(self) -> None:
        """Advance all bodies by one timestep. Does nothing while paused."""
        s = self.state
        if s.paused:
            return

        model = self.model
        bodies = s.bodies
        dt = model.timestep(s)

        n = len(bodies)
        for i in range(n):
            bi = bodies[i]
            for j in range(i + 1, n):
                bj = bodies[j]
                if overlapping(bi, bj):
                    if resolve_collision(bi, bj, s.restitution, separate=model.separates_on_collision):
                        self.collisions_resolved += 1
                elif model.pairwise:
                    model.apply_pair(bi, bj, dt, s)

        for body in bodies:
            model.apply_field(body, dt, s)
            body.position = (body.position[0] + body.velocity[0] * dt,
                             body.position[1] + body.velocity[1] * dt)
            if s.show_trails:
                body.add_trail_point()
            model.constrain(body, s)

    def tick(self, render: Optional[Callable[[FrameSnapshot], None]] = None) -> FrameSnapshot:
        """One frame: step, then hand a snapshot to `render` (if given) and return it."""
        self.step()
        snapshot = self.frame()
        if render is not None:
            render(snapshot)
        return snapshot

    # -----------------------
    # Lifecycle
    # -----------------------

    def reset(self) -> None:
        count = len(self.state.bodies)
        self.state.bodies = []
        self.collisions_resolved = 0
        logger.info("Simulation reset (%d bodies removed)", count)

    def toggle_pause(self) -> bool:
        self.state.paused = not self.state.paused
        logger.info("Simulation %s", "paused" if self.state.paused else "resumed")
        return self.state.paused

    def clear_trails(self) -> None:
        for b in self.state.bodies:
            b.trail.clear()

    def resize(self, width: float, height: float) -> None:
        width = _finite("Width", width)
        height = _finite("Height", height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.state.bounds = (width, height)
        logger.debug("Surface resized to %dx%d", width, height)

    def set_force_model(self, name: str) -> None:
        """Switch physics variant; the existing bodies are cleared since their masses no longer fit."""
        model = make_force_model(name)
        if type(model) is type(self.model):
            return
        self.model = model
        self.reset()
        logger.info("Force model set to %s", model.name)

    # -----------------------
    # Setters
    # -----------------------

    def set_mass(self, v: float) -> None:
        v = _finite("Mass", v)
        if v <= 0:
            raise ValueError(f"Mass must be positive, got {v}")
        self.state.mass = v

    def set_velocity(self, v: float) -> None:
        self.state.velocity = _non_negative("Velocity", v)

    def set_gravity(self, v: float) -> None:
        self.state.gravity = _finite("Gravity", v)

    def set_bounce(self, v: float) -> None:
        self.state.bounce = _unit_interval("Bounce", v)

    def set_restitution(self, v: float) -> None:
        self.state.restitution = _unit_interval("Restitution", v)

    def set_air_resistance(self, v: float) -> None:
        self.state.air_resistance = _non_negative("Air resistance", v)

    def set_time_scale(self, v: float) -> None:
        self.state.time_scale = _non_negative("Time scale", v)

    def set_gravity_preset(self, name: str) -> float:
        """Set G from a named preset ("strong", "weak"); any other name means G0."""
        self.state.gravity_preset = name if name in GRAVITY_PRESETS else "normal"
        self.state.G = GRAVITY_PRESETS[self.state.gravity_preset]
        logger.info("Gravity preset %r -> G=%.5e", name, self.state.G)
        return self.state.G

    def set_show_trails(self, value: bool) -> None:
        self.state.show_trails = bool(value)
        if not value:
            self.clear_trails()

    def set_show_vectors(self, value: bool) -> None:
        self.state.show_vectors = bool(value)

    def set_show_grid(self, value: bool) -> None:
        self.state.show_grid = bool(value)

    def set_background_theme(self, name: str) -> None:
        if name not in BACKGROUND_THEMES:
            raise ValueError(f"Unknown background theme {name!r}; expected one of {sorted(BACKGROUND_THEMES)}")
        self.state.background_theme = name

    def toggle_trails(self) -> bool:
        self.set_show_trails(not self.state.show_trails)
        return self.state.show_trails

    def toggle_vectors(self) -> bool:
        self.set_show_vectors(not self.state.show_vectors)
        return self.state.show_vectors

    def toggle_grid(self) -> bool:
        self.set_show_grid(not self.state.show_grid)
        return self.state.show_grid
