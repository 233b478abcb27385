#!/usr/bin/env python3
"""
Particle Playground application entry point and UI/renderer coordination.

What this module does
- Opens a Pygame viewport: the drawing surface. Dragging with the left mouse
  button launches a particle; keyboard shortcuts toggle the display options.
- Opens a Dear PyGui control panel with sliders for the spawn and physics
  parameters, gravity presets, display toggles and pause/reset buttons.
- Drives both from one explicit frame loop on the main thread.

Frame loop
- Each iteration: handle Pygame events, Simulation.tick() (step, then draw the
  snapshot), run queued Dear PyGui callbacks, render one Dear PyGui frame, then
  wait for the next frame slot. Frames never overlap, so the simulation needs no lock.

Running
1) Install: `pip install -e .`
2) Run: `playground` or `python playground_app.py [--config config.json] [--model gravity] [--seed 1]`

Controls (viewport)
- Left-drag: launch a particle (drag line and predicted path are shown while dragging)
- Space: pause/resume   R: reset   T: trails   V: velocity vectors   G: grid
- B: spawn a body at the centre   H: toggle help text   Esc: quit
"""

import argparse
import logging
from typing import List, Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from playground.config import load_config
from playground.constants import (
    BACKGROUND_THEMES,
    DRAG_LINE_COLOR,
    FPS,
    GRID_COLOR,
    GRID_SPACING,
    GRAVITY_PRESETS,
    HUD_COLOR,
    PREVIEW_COLOR,
    SAFE_COORD_LIMIT,
    TRAIL_ALPHA,
    VELOCITY_VECTOR_COLOR,
    VELOCITY_VECTOR_SCALE,
)
from playground.forces import FORCE_MODELS
from playground.logger_setup import setup_logging
from playground.render import FrameSnapshot
from playground.simulation import Simulation

logger = logging.getLogger("playground")

HELP_TEXT = "Left-drag: launch | Space: Pause | R: Reset | T: Trails | V: Vectors | G: Grid | B: Spawn body | H: Help"

# ============================================================
# Drawing helpers
# ============================================================

_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        try:
            _cached_font = pygame.font.SysFont("consolas", 16)
        except (OSError, pygame.error):
            _cached_font = pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt) -> Optional[Tuple[int, int]]:
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def _safe_points(points) -> List[Tuple[int, int]]:
    out = []
    for p in points:
        sp = _safe_point(p)
        if sp:
            out.append(sp)
    return out


# ============================================================
# Pygame Renderer
# ============================================================

class PygameRenderer:
    """
    Pygame viewport: draws bodies, trails, velocity vectors, grid and the drag preview.
    Turns left-button drags into spawn() calls.
    """
    def __init__(self, sim: Simulation):
        self.sim = sim
        self.surface = None
        self.overlay = None
        self.clock = None
        self.dragging = False
        self.drag_start = (0, 0)
        self.drag_current = (0, 0)
        self.show_help = True
        self.running = True

    def open(self):
        pygame.init()
        pygame.display.set_caption("Particle Playground")
        w, h = (int(v) for v in self.sim.state.bounds)
        self._set_mode(w, h)
        self.clock = pygame.time.Clock()

    def _set_mode(self, w, h):
        self.surface = pygame.display.set_mode((w, h), pygame.RESIZABLE)
        self.overlay = pygame.Surface((w, h), pygame.SRCALPHA)

    def handle_events(self) -> bool:
        """Process pending events. Returns False once the user asked to quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self._set_mode(event.w, event.h)
                self.sim.resize(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.dragging = True
                self.drag_start = event.pos
                self.drag_current = event.pos

            elif event.type == pygame.MOUSEMOTION and self.dragging:
                self.drag_current = event.pos

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if self.dragging:
                    self.dragging = False
                    self.sim.spawn(self.drag_start, event.pos)

            elif event.type == pygame.WINDOWLEAVE:
                # Leaving the window cancels the drag
                self.dragging = False

        return self.running

    def _handle_key(self, key):
        if key == pygame.K_SPACE:
            self.sim.toggle_pause()
        elif key == pygame.K_r:
            self.sim.reset()
        elif key == pygame.K_t:
            self.sim.toggle_trails()
        elif key == pygame.K_v:
            self.sim.toggle_vectors()
        elif key == pygame.K_g:
            self.sim.toggle_grid()
        elif key == pygame.K_b:
            self.sim.spawn_body()
        elif key == pygame.K_h:
            self.show_help = not self.show_help
        elif key == pygame.K_ESCAPE:
            self.running = False

    def draw_grid(self, surf, bounds):
        w, h = int(bounds[0]), int(bounds[1])
        for x in range(0, w, GRID_SPACING):
            pygame.draw.line(surf, GRID_COLOR, (x, 0), (x, h), 1)
        for y in range(0, h, GRID_SPACING):
            pygame.draw.line(surf, GRID_COLOR, (0, y), (w, y), 1)

    def draw_drag_preview(self, surf):
        start, end = self.drag_start, self.drag_current
        pygame.draw.line(surf, DRAG_LINE_COLOR, start, end, 2)
        pts = _safe_points(self.sim.predict_trajectory(start, end))
        if len(pts) > 1:
            pygame.draw.lines(surf, PREVIEW_COLOR, False, pts, 1)

    def draw(self, frame: FrameSnapshot):
        surf = self.surface
        overlay = self.overlay
        surf.fill(frame.background)
        overlay.fill((0, 0, 0, 0))

        if frame.show_grid:
            self.draw_grid(overlay, frame.bounds)

        # Draw trails
        if frame.show_trails:
            for b in frame.bodies:
                if len(b.trail) > 1:
                    pts = _safe_points(b.trail)
                    if len(pts) > 1:
                        pygame.draw.lines(overlay, (*b.color, TRAIL_ALPHA), False, pts, 2)

        surf.blit(overlay, (0, 0))
        overlay.fill((0, 0, 0, 0))

        # Draw bodies
        for b in frame.bodies:
            pos = _safe_point(b.position)
            if pos is None:
                continue
            vis_r = max(1, int(round(b.radius)))
            gfxdraw.filled_circle(surf, pos[0], pos[1], vis_r, b.color)
            gfxdraw.aacircle(surf, pos[0], pos[1], vis_r, b.color)

            # Velocity vector
            if frame.show_vectors:
                end = _safe_point((b.position[0] + b.velocity[0] * VELOCITY_VECTOR_SCALE,
                                   b.position[1] + b.velocity[1] * VELOCITY_VECTOR_SCALE))
                if end:
                    pygame.draw.line(overlay, VELOCITY_VECTOR_COLOR, pos, end, 2)

        if self.dragging:
            self.draw_drag_preview(overlay)

        surf.blit(overlay, (0, 0))

        # HUD text
        if self.show_help:
            draw_text(surf, HELP_TEXT, 10, 10, HUD_COLOR)
        status = "Paused" if frame.paused else "Running"
        draw_text(surf, f"Model: {frame.model_name}  Bodies: {frame.body_count}  [{status}]", 10, 30, HUD_COLOR)

        pygame.display.flip()


# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui control panel: spawn parameters, physics parameters, presets, display toggles.
    """
    def __init__(self, sim: Simulation):
        self.sim = sim
        self.status_msg_id = None
        self.pause_btn_id = None
        self.body_count_id = None
        self._build_ui()

    def _build_ui(self):
        s = self.sim.state
        dpg.create_context()
        dpg.configure_app(manual_callback_management=True)
        dpg.create_viewport(title='Particle Playground - Controls', width=420, height=560)

        with dpg.window(label="Controls", width=400, height=540, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Model:")
                dpg.add_combo(sorted(FORCE_MODELS), default_value=self.sim.model.name, width=150,
                              callback=lambda s_, a, u: self._set_force_model(a), tag="model_combo")

            dpg.add_separator()
            dpg.add_text("New Particles")
            dpg.add_slider_float(label="Mass", min_value=1.0, max_value=100.0, default_value=s.mass, width=220,
                                 callback=lambda s_, a, u: self._apply(self.sim.set_mass, a), tag="mass_slider")
            dpg.add_slider_float(label="Velocity", min_value=0.0, max_value=20.0, default_value=s.velocity, width=220,
                                 callback=lambda s_, a, u: self._apply(self.sim.set_velocity, a), tag="velocity_slider")
            dpg.add_button(label="Spawn Body", callback=self._spawn_body)

            dpg.add_separator()
            dpg.add_text("Physics")
            dpg.add_slider_float(label="Gravity", min_value=0.0, max_value=20.0, default_value=s.gravity, width=220,
                                 callback=lambda s_, a, u: self._apply(self.sim.set_gravity, a), tag="gravity_slider")
            dpg.add_slider_float(label="Bounce", min_value=0.0, max_value=1.0, default_value=s.bounce, width=220,
                                 callback=lambda s_, a, u: self._apply(self.sim.set_bounce, a), tag="bounce_slider")
            dpg.add_slider_float(label="Air resistance", min_value=0.0, max_value=0.2, default_value=s.air_resistance,
                                 width=220, callback=lambda s_, a, u: self._apply(self.sim.set_air_resistance, a))
            with dpg.group(horizontal=True):
                dpg.add_text("Gravity preset:")
                dpg.add_combo(list(GRAVITY_PRESETS), default_value=s.gravity_preset, width=120,
                              callback=lambda s_, a, u: self._set_gravity_preset(a), tag="preset_combo")
            dpg.add_slider_float(label="Time scale", min_value=0.0, max_value=10.0, default_value=s.time_scale,
                                 width=220, callback=lambda s_, a, u: self._apply(self.sim.set_time_scale, a))

            dpg.add_separator()
            dpg.add_text("Display")
            with dpg.group(horizontal=True):
                dpg.add_checkbox(label="Trails", default_value=s.show_trails, tag="trails_checkbox",
                                 callback=lambda s_, a, u: self.sim.set_show_trails(a))
                dpg.add_checkbox(label="Vectors", default_value=s.show_vectors, tag="vectors_checkbox",
                                 callback=lambda s_, a, u: self.sim.set_show_vectors(a))
                dpg.add_checkbox(label="Grid", default_value=s.show_grid, tag="grid_checkbox",
                                 callback=lambda s_, a, u: self.sim.set_show_grid(a))
            with dpg.group(horizontal=True):
                dpg.add_text("Background:")
                dpg.add_combo(list(BACKGROUND_THEMES), default_value=s.background_theme, width=120,
                              callback=lambda s_, a, u: self._apply(self.sim.set_background_theme, a), tag="theme_combo")

            dpg.add_separator()
            dpg.add_text("Simulation Controls")
            with dpg.group(horizontal=True):
                self.pause_btn_id = dpg.add_button(label="Pause", callback=self._toggle_play)
                dpg.add_button(label="Reset", callback=self._reset)
            self.body_count_id = dpg.add_text("Bodies: 0")
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=(255, 120, 120))

    def _apply(self, setter, value):
        try:
            setter(value)
        except ValueError as exc:
            self._set_error(str(exc))

    def _set_force_model(self, name):
        try:
            self.sim.set_force_model(name)
        except ValueError as exc:
            self._set_error(str(exc))
            return
        self._set_status(f"Model: {name} (bodies cleared)")

    def _set_gravity_preset(self, name):
        g = self.sim.set_gravity_preset(name)
        self._set_status(f"G = {g:.3e}")

    def _spawn_body(self):
        try:
            self.sim.spawn_body()
        except ValueError as exc:
            self._set_error(str(exc))

    def _toggle_play(self):
        paused = self.sim.toggle_pause()
        self._set_status(f"Simulation {'Paused' if paused else 'Playing'}.")

    def _reset(self):
        self.sim.reset()
        self._set_status("Simulation reset.")

    def sync(self):
        """Reflect state changed from the viewport (keyboard shortcuts, spawns) in the controls."""
        s = self.sim.state
        dpg.set_value("trails_checkbox", s.show_trails)
        dpg.set_value("vectors_checkbox", s.show_vectors)
        dpg.set_value("grid_checkbox", s.show_grid)
        dpg.set_value("preset_combo", s.gravity_preset)
        dpg.set_value("theme_combo", s.background_theme)
        dpg.configure_item(self.pause_btn_id, label="Resume" if s.paused else "Pause")
        dpg.set_value(self.body_count_id, f"Bodies: {len(s.bodies)}")


# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive 2D particle and gravity sandbox.")
    parser.add_argument("--config", default=None, help="Path to config.json (default: $PLAYGROUND_CONFIG or ./config.json)")
    parser.add_argument("--model", choices=sorted(FORCE_MODELS), default=None, help="Force model to start with")
    parser.add_argument("--seed", type=int, default=None, help="Seed for spawn randomness")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    cfg = load_config(args.config)
    if args.model is not None:
        cfg.force_model = args.model
    if args.seed is not None:
        cfg.seed = args.seed
    setup_logging(cfg.logging)
    logger.info("Application starting with model %s", cfg.force_model)

    sim = cfg.build_simulation()
    renderer = PygameRenderer(sim)
    renderer.open()
    ui = UI(sim)

    frame_count = 0
    try:
        while renderer.handle_events() and dpg.is_dearpygui_running():
            sim.tick(renderer.draw)

            dpg.run_callbacks(dpg.get_callback_queue())
            # ~10Hz panel refresh at 60 FPS
            if frame_count % 6 == 0:
                ui.sync()
            dpg.render_dearpygui_frame()

            frame_count += 1
            renderer.clock.tick(FPS)
    finally:
        logger.info("Application shutting down.")
        dpg.destroy_context()
        pygame.quit()


if __name__ == "__main__":
    main()
