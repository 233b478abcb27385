import random

import pytest

from playground.data_models import Body
from playground.forces import PairwiseGravity, UniformField
from playground.simulation import Simulation, SimulationState


@pytest.fixture
def uniform_sim():
    """Uniform-field simulation with gravity switched off."""
    return Simulation(UniformField(), SimulationState(gravity=0.0), random.Random(1234))


@pytest.fixture
def gravity_sim():
    return Simulation(PairwiseGravity(), SimulationState(), random.Random(1234))


def make_body(position, velocity=(0.0, 0.0), mass=10.0, radius=5.0):
    return Body(mass=mass, radius=radius, position=position, velocity=velocity)


def total_momentum(bodies):
    return (sum(b.mass * b.velocity[0] for b in bodies),
            sum(b.mass * b.velocity[1] for b in bodies))
