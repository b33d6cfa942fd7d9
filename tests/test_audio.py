import pytest

from divesim.core.enums import AlertLevel
from divesim.monitors.audio import (
    AudioAlertMonitor,
    CYLINDER_PRESSURE,
    DIVE_TIME,
    UMBILICAL_PRESSURE,
    cylinder_pressure_level,
    dive_time_level,
    evaluate_audio_conditions,
    umbilical_pressure_level,
)


@pytest.mark.parametrize("p1,p2,expected", [
    (200, 200, AlertLevel.NONE),
    (19, 200, AlertLevel.WARNING),
    (200, 9.5, AlertLevel.CRITICAL),
    (20, 20, AlertLevel.NONE),
])
def test_cylinder_level(p1, p2, expected):
    assert cylinder_pressure_level(p1, p2) == expected


@pytest.mark.parametrize("pressure,expected", [
    (0, AlertLevel.NONE),
    (2, AlertLevel.CRITICAL),
    (5, AlertLevel.WARNING),
    (12, AlertLevel.NONE),
    (22, AlertLevel.WARNING),
    (28, AlertLevel.CRITICAL),
])
def test_umbilical_level(pressure, expected):
    assert umbilical_pressure_level(pressure) == expected


def test_dive_time_level():
    assert dive_time_level(0) == AlertLevel.NONE
    assert dive_time_level(1.5) == AlertLevel.CRITICAL
    assert dive_time_level(4) == AlertLevel.WARNING
    assert dive_time_level(30) == AlertLevel.NONE


def test_initial_state_is_quiet(sim):
    levels = evaluate_audio_conditions(sim.state)
    assert set(levels.values()) == {AlertLevel.NONE}


class TestMonitor:
    @pytest.fixture
    def events(self):
        return []

    @pytest.fixture
    def monitor(self, sim, events):
        m = AudioAlertMonitor(sim, sink=events.append)
        m.attach()
        return m

    def test_silent_while_paused(self, sim, monitor, events):
        sim.set_cylinder1_pressure(5)
        assert events == []

    def test_transitions_reported_once(self, sim, monitor, events):
        sim.start_simulation()
        sim.set_cylinder1_pressure(15)
        sim.set_cylinder1_pressure(14)
        assert [(e.condition, e.level) for e in events] == [(CYLINDER_PRESSURE, AlertLevel.WARNING)]
        sim.set_cylinder1_pressure(5)
        assert events[-1].level == AlertLevel.CRITICAL
        assert events[-1].previous == AlertLevel.WARNING

    def test_pause_stops_all(self, sim, monitor, events):
        sim.start_simulation()
        sim.set_umbilical_pressure(2)
        sim.pause_simulation()
        assert events[-1].condition == UMBILICAL_PRESSURE
        assert events[-1].level == AlertLevel.NONE
        assert monitor.levels[UMBILICAL_PRESSURE] == AlertLevel.NONE

    def test_mute_keeps_levels(self, sim, monitor, events):
        sim.start_simulation()
        sim.set_cylinder2_pressure(15)
        assert monitor.toggle_mute() is True
        assert events[-1].level == AlertLevel.NONE
        count = len(events)
        sim.set_cylinder2_pressure(5)
        assert len(events) == count
        assert monitor.levels[CYLINDER_PRESSURE] == AlertLevel.CRITICAL
        assert monitor.toggle_mute() is False
        assert events[-1].level == AlertLevel.CRITICAL

    def test_dive_time_condition(self, sim, monitor, events):
        sim.start_simulation()
        sim.set_cylinder1_volume(10)
        sim.set_cylinder2_volume(10)
        sim.recompute_derived()
        # 10% / 135 L/min * 10 is under one minute.
        assert monitor.levels[DIVE_TIME] == AlertLevel.CRITICAL

    def test_detach(self, sim, monitor, events):
        sim.start_simulation()
        monitor.detach()
        sim.set_cylinder1_pressure(5)
        assert events == []
