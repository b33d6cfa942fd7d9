from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from divesim.core.engine import DiveSimulation
from divesim.core.enums import Mode
from divesim.core.scheduler import TickScheduler
from divesim.core.state import SimulationConfig
from divesim.core.timers import VirtualTimerService


T0 = 1000.0


@pytest.fixture
def timers():
    """Virtual clock starting at T0 seconds."""
    return VirtualTimerService(start=T0)


@pytest.fixture
def sim(timers):
    """Simulation in its initial (manual, paused) state."""
    return DiveSimulation(SimulationConfig(), timers=timers)


@pytest.fixture
def scheduler(sim):
    """Tick scheduler attached to the simulation."""
    sched = TickScheduler(sim)
    sched.attach()
    return sched


@pytest.fixture
def auto_sim(sim, scheduler):
    """Simulation in auto mode with the scheduler attached, not yet started."""
    sim.set_mode(Mode.AUTO)
    return sim


@pytest.fixture
def advance_time(timers):
    """Helper to move the virtual clock forward one second at a time."""
    def _advance(seconds, dt=1.0):
        if seconds <= 0:
            return
        steps = int(seconds / dt)
        for _ in range(steps):
            timers.advance(dt)
        remainder = seconds - steps * dt
        if remainder > 1e-9:
            timers.advance(remainder)

    return _advance
