#!/usr/bin/env python3
"""
Startup configuration loading.

Schema (config.json):
{
  "seed": null,                      # optional int, seeds spawn randomness
  "force_model": "uniform",          # "uniform" | "gravity"
  "width": 1100,
  "height": 800,
  "simulation": {
    "mass": 10.0,
    "velocity": 5.0,
    "gravity": 9.81,
    "bounce": 0.8,
    "restitution": 0.8,
    "air_resistance": 0.0,
    "gravity_preset": "normal",      # "strong" | "normal" | "weak"
    "time_scale": 1.0
  },
  "display": {"show_trails": true, "show_vectors": false, "show_grid": false,
              "background_theme": "space"},   # "space" | "dark" | "light"
  "logging": {"level": "INFO", "format": "%(asctime)s %(levelname)s %(message)s", "file": null}
}

Every key is optional. A missing file means all defaults; a file that exists
but cannot be parsed, or holds a value of the wrong type, is an error.
"""
import json
import logging
import math
import os
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

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
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .forces import FORCE_MODELS, make_force_model
from .simulation import Simulation, SimulationState
from .utils import try_float

logger = logging.getLogger("playground")

CONFIG_ENV_VAR = "PLAYGROUND_CONFIG"
DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class PlaygroundConfig:
    seed: Optional[int] = None
    force_model: str = "uniform"
    width: int = VIEW_WIDTH
    height: int = VIEW_HEIGHT

    mass: float = DEFAULT_MASS
    velocity: float = DEFAULT_VELOCITY
    gravity: float = DEFAULT_GRAVITY
    bounce: float = DEFAULT_BOUNCE
    restitution: float = DEFAULT_RESTITUTION
    air_resistance: float = DEFAULT_AIR_RESISTANCE
    gravity_preset: str = "normal"
    time_scale: float = DEFAULT_TIME_SCALE

    show_trails: bool = True
    show_vectors: bool = False
    show_grid: bool = False
    background_theme: str = DEFAULT_BACKGROUND_THEME

    logging: Dict[str, Any] = field(default_factory=lambda: {
        "level": "INFO",
        "format": DEFAULT_LOG_FORMAT,
        "file": None,
    })

    def build_simulation(self) -> Simulation:
        """Create a Simulation with these settings applied through its setters."""
        sim = Simulation(
            model=make_force_model(self.force_model),
            state=SimulationState(),
            rng=random.Random(self.seed),
        )
        sim.resize(self.width, self.height)
        sim.set_mass(self.mass)
        sim.set_velocity(self.velocity)
        sim.set_gravity(self.gravity)
        sim.set_bounce(self.bounce)
        sim.set_restitution(self.restitution)
        sim.set_air_resistance(self.air_resistance)
        sim.set_time_scale(self.time_scale)
        sim.set_gravity_preset(self.gravity_preset)
        sim.set_show_trails(self.show_trails)
        sim.set_show_vectors(self.show_vectors)
        sim.set_show_grid(self.show_grid)
        sim.set_background_theme(self.background_theme)
        return sim


def resolve_config_path(path: Optional[str] = None) -> str:
    return path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def _read_json(path: str) -> Optional[dict]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Could not read config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must contain a JSON object")
    return data


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"Config section {name!r} must be an object")
    return section


def _coerce_float(section: dict, key: str, default: float) -> float:
    if key not in section:
        return default
    val = try_float(section[key])
    if val is None or isinstance(section[key], bool) or not math.isfinite(val):
        raise ValueError(f"Config value {key!r} must be a finite number, got {section[key]!r}")
    return val


def _coerce_bool(section: dict, key: str, default: bool) -> bool:
    if key not in section:
        return default
    if not isinstance(section[key], bool):
        raise ValueError(f"Config value {key!r} must be true or false, got {section[key]!r}")
    return section[key]


def config_from_dict(data: dict) -> PlaygroundConfig:
    cfg = PlaygroundConfig()

    seed = data.get("seed")
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise ValueError(f"Config value 'seed' must be an integer or null, got {seed!r}")
    cfg.seed = seed

    cfg.force_model = data.get("force_model", cfg.force_model)
    if cfg.force_model not in FORCE_MODELS:
        raise ValueError(f"Config value 'force_model' must be one of {sorted(FORCE_MODELS)}, got {cfg.force_model!r}")

    cfg.width = int(_coerce_float(data, "width", cfg.width))
    cfg.height = int(_coerce_float(data, "height", cfg.height))

    sim = _section(data, "simulation")
    cfg.mass = _coerce_float(sim, "mass", cfg.mass)
    cfg.velocity = _coerce_float(sim, "velocity", cfg.velocity)
    cfg.gravity = _coerce_float(sim, "gravity", cfg.gravity)
    cfg.bounce = _coerce_float(sim, "bounce", cfg.bounce)
    cfg.restitution = _coerce_float(sim, "restitution", cfg.restitution)
    cfg.air_resistance = _coerce_float(sim, "air_resistance", cfg.air_resistance)
    cfg.time_scale = _coerce_float(sim, "time_scale", cfg.time_scale)
    cfg.gravity_preset = str(sim.get("gravity_preset", cfg.gravity_preset))

    display = _section(data, "display")
    cfg.show_trails = _coerce_bool(display, "show_trails", cfg.show_trails)
    cfg.show_vectors = _coerce_bool(display, "show_vectors", cfg.show_vectors)
    cfg.show_grid = _coerce_bool(display, "show_grid", cfg.show_grid)
    cfg.background_theme = display.get("background_theme", cfg.background_theme)
    if not isinstance(cfg.background_theme, str) or cfg.background_theme not in BACKGROUND_THEMES:
        raise ValueError(f"Config value 'background_theme' must be one of {sorted(BACKGROUND_THEMES)}, got {cfg.background_theme!r}")

    cfg.logging.update(_section(data, "logging"))
    return cfg


def load_config(path: Optional[str] = None) -> PlaygroundConfig:
    """
    Load configuration from `path`, $PLAYGROUND_CONFIG or ./config.json.

    Returns defaults if the file does not exist; raises ValueError if it is malformed.
    """
    path = resolve_config_path(path)
    data = _read_json(path)
    if data is None:
        logger.warning("Config file %s not found, using defaults", path)
        return PlaygroundConfig()
    return config_from_dict(data)
