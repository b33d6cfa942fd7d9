import pytest

from divesim.core.profiles import PROFILE_STRATEGIES, ScriptedDiveProfile, SimpleDiveProfile
from divesim.core.state import DiveState, SimulationConfig


@pytest.fixture
def config():
    return SimulationConfig()


def test_strategy_table():
    assert PROFILE_STRATEGIES[True] is ScriptedDiveProfile
    assert PROFILE_STRATEGIES[False] is SimpleDiveProfile


@pytest.mark.parametrize("elapsed,depth", [
    (0, 0), (9.9, 0), (10, 10), (25, 20), (45, 40), (50, 30), (75, 10), (90, 0), (400, 0), (-5, 0),
])
def test_scripted_depth_schedule(config, elapsed, depth):
    assert ScriptedDiveProfile(config).depth_at(elapsed) == depth


def test_scripted_custom_stages():
    config = SimulationConfig(stage_seconds=5, stage_depth_step=5, profile_max_depth=15)
    profile = ScriptedDiveProfile(config)
    assert [profile.depth_at(t) for t in (0, 5, 10, 15, 20, 25, 30)] == [0, 5, 10, 15, 10, 5, 0]


def test_scripted_advance_at_surface(config):
    delta = ScriptedDiveProfile(config).advance(DiveState(), 0)
    assert delta.depth == 0
    assert delta.cylinder1_pressure == pytest.approx(199.7)
    assert delta.cylinder1_volume == pytest.approx(99.85)
    assert delta.umbilical_pressure == 10.0
    assert delta.diver1_pressure == delta.diver2_pressure == 10.0
    assert delta.remaining_dive_time == pytest.approx(199.7 * 50 / 15)


def test_scripted_does_not_mutate(config):
    state = DiveState()
    ScriptedDiveProfile(config).advance(state, 30)
    assert state.depth == 20.0
    assert state.cylinder1_pressure == 200.0


def test_simple_keeps_depths(config):
    state = DiveState()
    state.diver1_depth = 10
    delta = SimpleDiveProfile(config).advance(state, 100)
    assert delta.depth is None
    assert delta.diver1_depth is None
    # diver 1 breathes 20 L/min at 2 ATA from a 50 L cylinder
    assert delta.cylinder1_pressure == pytest.approx(200 - 2 * 20 / 50)
    assert delta.cylinder2_pressure == pytest.approx(200 - 25 / 50)
    assert delta.umbilical_pressure == pytest.approx(12.0)
    assert delta.diver1_pressure == pytest.approx(7.0)
    assert delta.diver2_pressure == pytest.approx(12.0)
