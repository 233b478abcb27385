import math

import pytest

from playground.constants import G0, TRAIL_LENGTH
from playground.forces import PairwiseGravity, UniformField

from conftest import make_body, total_momentum


def _state_of(bodies):
    return [(b.position, b.velocity) for b in bodies]


# -----------------------
# Uniform field
# -----------------------

def test_left_wall_bounce(uniform_sim):
    r = 5.0
    body = make_body((r - 0.01, 400.0), velocity=(-3.0, 0.0), radius=r)
    uniform_sim.bodies.append(body)

    uniform_sim.step()

    assert body.position[0] == pytest.approx(r)
    assert body.velocity[0] == pytest.approx(3.0 * uniform_sim.state.bounce)


def test_right_and_bottom_walls(uniform_sim):
    width, height = uniform_sim.state.bounds
    body = make_body((width - 6.0, height - 6.0), velocity=(4.0, 4.0), radius=5.0)
    uniform_sim.bodies.append(body)
    uniform_sim.set_bounce(0.5)

    uniform_sim.step()

    assert body.position == pytest.approx((width - 5.0, height - 5.0))
    assert body.velocity == pytest.approx((-2.0, -2.0))


def test_uniform_gravity_accelerates_downward(uniform_sim):
    uniform_sim.set_gravity(1.5)
    body = make_body((300.0, 100.0))
    uniform_sim.bodies.append(body)

    uniform_sim.step()
    assert body.velocity == pytest.approx((0.0, 1.5))
    assert body.position == pytest.approx((300.0, 101.5))

    uniform_sim.step()
    assert body.velocity == pytest.approx((0.0, 3.0))
    assert body.position == pytest.approx((300.0, 104.5))


def test_air_resistance_damps_velocity(uniform_sim):
    uniform_sim.set_air_resistance(0.1)
    body = make_body((300.0, 300.0), velocity=(10.0, 0.0))
    uniform_sim.bodies.append(body)

    uniform_sim.step()

    assert body.velocity[0] == pytest.approx(9.0)


def test_uniform_collision_conserves_momentum(uniform_sim):
    a = make_body((300.0, 300.0), velocity=(2.0, 0.0), mass=10.0, radius=6.0)
    b = make_body((310.0, 300.0), velocity=(-1.0, 0.0), mass=20.0, radius=6.0)
    uniform_sim.bodies.extend([a, b])
    before = total_momentum([a, b])

    uniform_sim.step()

    assert uniform_sim.collisions_resolved == 1
    after = total_momentum([a, b])
    assert after[0] == pytest.approx(before[0])
    assert after[1] == pytest.approx(before[1])


# -----------------------
# Pairwise gravity
# -----------------------

def test_gravitational_attraction_points_toward_each_other(gravity_sim):
    gravity_sim.set_mass(5)
    a = gravity_sim.spawn((100.0, 100.0), (100.0, 100.0))
    b = gravity_sim.spawn((200.0, 100.0), (200.0, 100.0))
    assert a.mass == pytest.approx(5e24)
    assert gravity_sim.state.G == G0

    gravity_sim.step()

    assert a.velocity[0] > 0
    assert b.velocity[0] < 0
    assert a.velocity[1] == pytest.approx(0.0, abs=1e-6 * abs(a.velocity[0]))
    assert b.velocity[1] == pytest.approx(0.0, abs=1e-6 * abs(b.velocity[0]))


def test_gravity_step_magnitude(gravity_sim):
    a = make_body((0.0, 0.0), mass=5e24, radius=1.0)
    b = make_body((100.0, 0.0), mass=5e24, radius=1.0)
    gravity_sim.bodies.extend([a, b])
    dt = 0.016

    gravity_sim.step()

    force = G0 * 5e24 * 5e24 / 100.0 ** 2
    assert a.velocity[0] == pytest.approx(force / 5e24 * dt)
    assert a.position[0] == pytest.approx(a.velocity[0] * dt)


def test_time_scale_scales_timestep(gravity_sim):
    gravity_sim.set_time_scale(2.0)
    body = make_body((0.0, 0.0), velocity=(10.0, 0.0), mass=5e24)
    gravity_sim.bodies.append(body)

    gravity_sim.step()

    assert body.position[0] == pytest.approx(10.0 * 0.032)


def test_gravity_has_no_walls(gravity_sim):
    body = make_body((1.0, 1.0), velocity=(-500.0, -500.0), mass=5e24)
    gravity_sim.bodies.append(body)

    gravity_sim.step()

    assert body.position[0] < 0
    assert body.velocity == (-500.0, -500.0)


def test_gravity_collision_updates_velocities_only(gravity_sim):
    a = make_body((100.0, 100.0), velocity=(1.0, 0.0), mass=5e24, radius=28.0)
    b = make_body((110.0, 100.0), velocity=(-1.0, 0.0), mass=5e24, radius=28.0)
    gravity_sim.bodies.extend([a, b])
    before = total_momentum([a, b])

    gravity_sim.step()

    assert gravity_sim.collisions_resolved == 1
    # No gravity between overlapping bodies this step, so momentum is exact
    after = total_momentum([a, b])
    assert after[0] == pytest.approx(before[0], abs=1e12)
    # Positions moved only by the new velocity
    assert a.position[0] == pytest.approx(100.0 + a.velocity[0] * 0.016)
    assert b.position[0] == pytest.approx(110.0 + b.velocity[0] * 0.016)
    assert a.velocity[0] < 0 < b.velocity[0]


def test_coincident_gravity_pair_stays_finite(gravity_sim):
    model = PairwiseGravity()
    a = make_body((10.0, 10.0), mass=5e24)
    b = make_body((10.0, 10.0), mass=5e24)

    model.apply_pair(a, b, 0.016, gravity_sim.state)

    for value in (*a.velocity, *b.velocity):
        assert math.isfinite(value)


@pytest.mark.parametrize("sim_fixture", ["uniform_sim", "gravity_sim"])
def test_distant_bodies_never_reach_collision_resolver(request, monkeypatch, sim_fixture):
    sim = request.getfixturevalue(sim_fixture)

    def fail(*args, **kwargs):
        raise AssertionError("collision resolver called for non-overlapping pair")

    monkeypatch.setattr("playground.simulation.resolve_collision", fail)
    sim.bodies.append(make_body((100.0, 100.0), mass=1.0, radius=5.0))
    sim.bodies.append(make_body((400.0, 100.0), mass=1.0, radius=5.0))

    for _ in range(5):
        sim.step()

    assert sim.collisions_resolved == 0


# -----------------------
# Trails, pause, reset
# -----------------------

def test_trail_length_is_bounded(uniform_sim):
    uniform_sim.set_gravity(0.5)
    for i in range(5):
        uniform_sim.spawn((100.0 + 60 * i, 100.0))

    for step in range(120):
        uniform_sim.step()
        for b in uniform_sim.bodies:
            assert 0 <= len(b.trail) <= TRAIL_LENGTH

    assert all(len(b.trail) == TRAIL_LENGTH for b in uniform_sim.bodies)


def test_trail_records_positions_in_order(uniform_sim):
    body = make_body((300.0, 300.0), velocity=(1.0, 0.0))
    uniform_sim.bodies.append(body)

    uniform_sim.step()
    uniform_sim.step()

    assert uniform_sim.trail_for(body) == ((301.0, 300.0), (302.0, 300.0))


def test_full_trail_drops_oldest_point(uniform_sim):
    body = make_body((300.0, 300.0), velocity=(1.0, 0.0))
    uniform_sim.bodies.append(body)

    for _ in range(TRAIL_LENGTH + 10):
        uniform_sim.step()

    trail = uniform_sim.trail_for(body)
    assert len(trail) == TRAIL_LENGTH
    assert trail[0] == (311.0, 300.0)
    assert trail[-1] == (360.0, 300.0)
    assert [p[0] for p in trail] == [311.0 + k for k in range(TRAIL_LENGTH)]


def test_disabling_trails_clears_and_stops_recording(uniform_sim):
    body = uniform_sim.spawn((300.0, 300.0), (310.0, 300.0))
    uniform_sim.step()
    assert len(body.trail) == 1

    uniform_sim.set_show_trails(False)
    assert len(body.trail) == 0
    uniform_sim.step()
    assert len(body.trail) == 0


def test_pause_freezes_bodies(uniform_sim):
    uniform_sim.set_gravity(2.0)
    for i in range(4):
        uniform_sim.spawn((100.0 + 50 * i, 200.0))
    uniform_sim.step()

    assert uniform_sim.toggle_pause() is True
    frozen = _state_of(uniform_sim.bodies)
    for _ in range(10):
        uniform_sim.step()
    assert _state_of(uniform_sim.bodies) == frozen

    assert uniform_sim.toggle_pause() is False
    uniform_sim.step()
    assert _state_of(uniform_sim.bodies) != frozen


def test_tick_renders_even_when_paused(uniform_sim):
    frames = []
    uniform_sim.spawn((100.0, 100.0))
    uniform_sim.toggle_pause()

    snapshot = uniform_sim.tick(frames.append)

    assert frames == [snapshot]
    assert snapshot.paused
    assert snapshot.body_count == 1


def test_reset_clears_everything(uniform_sim):
    for i in range(3):
        uniform_sim.spawn((100.0 + 40 * i, 100.0), (120.0 + 40 * i, 90.0))
    for _ in range(5):
        uniform_sim.step()

    uniform_sim.reset()

    assert uniform_sim.bodies == []
    assert uniform_sim.bodies_snapshot() == []
    assert uniform_sim.frame().bodies == ()


# -----------------------
# Parameters
# -----------------------

def test_gravity_presets(gravity_sim):
    assert gravity_sim.set_gravity_preset("strong") == pytest.approx(100 * G0)
    assert gravity_sim.set_gravity_preset("weak") == pytest.approx(0.01 * G0)
    assert gravity_sim.set_gravity_preset("normal") == G0
    gravity_sim.set_gravity_preset("strong")
    assert gravity_sim.set_gravity_preset("anything-else") == G0


def test_gravity_preset_name_is_kept(gravity_sim):
    assert gravity_sim.state.gravity_preset == "normal"
    gravity_sim.set_gravity_preset("strong")
    assert gravity_sim.state.gravity_preset == "strong"
    gravity_sim.set_gravity_preset("anything-else")
    assert gravity_sim.state.gravity_preset == "normal"


@pytest.mark.parametrize("setter", ["set_bounce", "set_velocity", "set_air_resistance",
                                    "set_time_scale", "set_restitution"])
def test_setters_reject_negative_values(uniform_sim, setter):
    with pytest.raises(ValueError):
        getattr(uniform_sim, setter)(-1)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
@pytest.mark.parametrize("setter", ["set_mass", "set_gravity", "set_bounce", "set_restitution",
                                    "set_velocity", "set_air_resistance", "set_time_scale"])
def test_setters_reject_non_finite_values(uniform_sim, setter, value):
    before = uniform_sim.state
    snapshot = (before.mass, before.gravity, before.bounce, before.restitution,
                before.velocity, before.air_resistance, before.time_scale)
    with pytest.raises(ValueError):
        getattr(uniform_sim, setter)(value)
    s = uniform_sim.state
    assert (s.mass, s.gravity, s.bounce, s.restitution,
            s.velocity, s.air_resistance, s.time_scale) == snapshot


@pytest.mark.parametrize("setter", ["set_bounce", "set_restitution"])
def test_coefficients_limited_to_unit_interval(uniform_sim, setter):
    with pytest.raises(ValueError):
        getattr(uniform_sim, setter)(1.5)
    getattr(uniform_sim, setter)(1.0)
    getattr(uniform_sim, setter)(0.0)


def test_mass_must_be_positive(uniform_sim):
    with pytest.raises(ValueError):
        uniform_sim.set_mass(0)


def test_parameter_changes_apply_on_next_step(uniform_sim):
    body = make_body((300.0, 300.0))
    uniform_sim.bodies.append(body)
    uniform_sim.step()
    assert body.velocity == (0.0, 0.0)

    uniform_sim.set_gravity(3.0)
    uniform_sim.step()
    assert body.velocity == pytest.approx((0.0, 3.0))


def test_switching_force_model_clears_bodies(uniform_sim):
    uniform_sim.spawn((100.0, 100.0))

    uniform_sim.set_force_model("gravity")

    assert isinstance(uniform_sim.model, PairwiseGravity)
    assert uniform_sim.bodies == []


def test_switching_to_same_model_keeps_bodies(uniform_sim):
    uniform_sim.spawn((100.0, 100.0))
    uniform_sim.set_force_model("uniform")
    assert isinstance(uniform_sim.model, UniformField)
    assert len(uniform_sim.bodies) == 1


def test_unknown_force_model(uniform_sim):
    with pytest.raises(ValueError):
        uniform_sim.set_force_model("magnetic")


def test_resize(uniform_sim):
    uniform_sim.resize(640, 480)
    assert uniform_sim.state.bounds == (640.0, 480.0)
    with pytest.raises(ValueError):
        uniform_sim.resize(0, 480)


@pytest.mark.parametrize("size", [(math.nan, 480), (640, math.inf), (-math.inf, 480)])
def test_resize_rejects_non_finite(uniform_sim, size):
    bounds = uniform_sim.state.bounds
    with pytest.raises(ValueError):
        uniform_sim.resize(*size)
    assert uniform_sim.state.bounds == bounds


def test_display_toggles(uniform_sim):
    assert uniform_sim.toggle_vectors() is True
    assert uniform_sim.toggle_grid() is True
    assert uniform_sim.toggle_trails() is False
    frame = uniform_sim.frame()
    assert (frame.show_trails, frame.show_vectors, frame.show_grid) == (False, True, True)
