#!/usr/bin/env python3
"""
Shared constants for the particle playground.

Distances are in pixels of the drawing surface, time in frames for the uniform
field and in (scaled) seconds for pairwise gravity. Masses in the gravitational
model are slider units multiplied by GRAVITY_MASS_SCALE.
"""

# Gravitational constant and presets
G0 = 6.67430e-11
GRAVITY_PRESETS = {
    "strong": 100.0 * G0,
    "normal": G0,
    "weak": 0.01 * G0,
}

# Uniform field defaults (per-frame units)
DEFAULT_MASS = 10.0
DEFAULT_VELOCITY = 5.0
DEFAULT_GRAVITY = 9.81
DEFAULT_BOUNCE = 0.8
DEFAULT_AIR_RESISTANCE = 0.0

# Body-body collisions
DEFAULT_RESTITUTION = 0.8

# Pairwise gravity
GRAVITY_MASS_SCALE = 1e24
BASE_DT = 0.016  # seconds per step before time scaling
DEFAULT_TIME_SCALE = 1.0

# Launch from a drag gesture
LAUNCH_SCALE = 0.1
LAUNCH_VELOCITY_REFERENCE = 5.0  # uniform field scales launches by velocity / this

# Numerical safety
MIN_DISTANCE = 1e-6  # below this a pair is treated as coincident
MIN_RADIUS = 0.5

# Trails
TRAIL_LENGTH = 50

# Drag preview
PREVIEW_STEPS = 20

# Spawned colours: random hue, fixed saturation/lightness
SPAWN_SATURATION = 0.70
SPAWN_LIGHTNESS = 0.60

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
FPS = 60
# Viewport background per theme name
BACKGROUND_THEMES = {
    "space": (12, 10, 24),
    "dark": (24, 24, 28),
    "light": (228, 228, 236),
}
DEFAULT_BACKGROUND_THEME = "space"
GRID_SPACING = 50
GRID_COLOR = (124, 77, 255, 26)
DRAG_LINE_COLOR = (124, 77, 255, 128)
PREVIEW_COLOR = (124, 77, 255, 51)
VELOCITY_VECTOR_COLOR = (255, 255, 255, 128)
VELOCITY_VECTOR_SCALE = 5.0
TRAIL_ALPHA = 64
HUD_COLOR = (200, 200, 200)
SPAWN_BODY_OFFSET = (100.0, 0.0)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
