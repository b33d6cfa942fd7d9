"""
Audible alert conditions.

Three independent conditions are tracked, each with a warning and a
critical level:
- cylinder pressure (either cylinder),
- umbilical pressure outside its safe band,
- remaining dive time.

The monitor only reports level transitions; producing and repeating sounds
is up to the sink that receives them.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from divesim.core.constants import AudioTuning
from divesim.core.enums import AlertLevel
from divesim.core.state import DiveState

logger = logging.getLogger(__name__)

CYLINDER_PRESSURE = "cylinder_pressure"
UMBILICAL_PRESSURE = "umbilical_pressure"
DIVE_TIME = "dive_time"
AUDIO_CONDITIONS = (CYLINDER_PRESSURE, UMBILICAL_PRESSURE, DIVE_TIME)


@dataclass(frozen=True)
class AudioEvent:
    condition: str
    level: AlertLevel
    previous: AlertLevel


def cylinder_pressure_level(p1: float, p2: float, tuning: AudioTuning = AudioTuning()) -> AlertLevel:
    if p1 < tuning.cylinder_critical_bar or p2 < tuning.cylinder_critical_bar:
        return AlertLevel.CRITICAL
    if p1 < tuning.cylinder_warning_bar or p2 < tuning.cylinder_warning_bar:
        return AlertLevel.WARNING
    return AlertLevel.NONE


def umbilical_pressure_level(pressure: float, tuning: AudioTuning = AudioTuning()) -> AlertLevel:
    # Zero means no supply reading; stay quiet.
    if pressure <= 0:
        return AlertLevel.NONE
    if pressure < tuning.umbilical_critical_min or pressure > tuning.umbilical_critical_max:
        return AlertLevel.CRITICAL
    if pressure < tuning.umbilical_safe_min or pressure > tuning.umbilical_safe_max:
        return AlertLevel.WARNING
    return AlertLevel.NONE


def dive_time_level(minutes: float, tuning: AudioTuning = AudioTuning()) -> AlertLevel:
    if minutes <= 0:
        return AlertLevel.NONE
    if minutes < tuning.dive_time_critical_min:
        return AlertLevel.CRITICAL
    if minutes < tuning.dive_time_warning_min:
        return AlertLevel.WARNING
    return AlertLevel.NONE


def evaluate_audio_conditions(state: DiveState, tuning: AudioTuning = AudioTuning()) -> Dict[str, AlertLevel]:
    """Current level of every audible condition."""
    return {
        CYLINDER_PRESSURE: cylinder_pressure_level(
            state.cylinder1_pressure, state.cylinder2_pressure, tuning
        ),
        UMBILICAL_PRESSURE: umbilical_pressure_level(state.umbilical_pressure, tuning),
        DIVE_TIME: dive_time_level(state.remaining_dive_time, tuning),
    }


class AudioAlertMonitor:
    """
    Follows simulation snapshots and reports audible-condition transitions.

    Only a running simulation sounds alerts; pausing reports every active
    condition as silenced. Muting silences the sink without losing track of
    the current levels.
    """
    def __init__(self, sim, sink: Optional[Callable[[AudioEvent], None]] = None,
                 tuning: Optional[AudioTuning] = None):
        self.sim = sim
        self.sink = sink
        self.tuning = tuning or AudioTuning()
        self.levels: Dict[str, AlertLevel] = {name: AlertLevel.NONE for name in AUDIO_CONDITIONS}
        self.muted = False
        self._unsubscribe = None

    def attach(self):
        if self._unsubscribe is None:
            self._unsubscribe = self.sim.subscribe(self.update)

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.stop_all()

    def update(self, state: DiveState) -> List[AudioEvent]:
        if not state.is_running:
            return self.stop_all()
        return self._transition(evaluate_audio_conditions(state, self.tuning))

    def stop_all(self) -> List[AudioEvent]:
        return self._transition({name: AlertLevel.NONE for name in AUDIO_CONDITIONS})

    def toggle_mute(self) -> bool:
        """Flip mute; the sink hears the silencing or the restored levels."""
        if not self.muted:
            self._deliver([
                AudioEvent(name, AlertLevel.NONE, level)
                for name, level in self.levels.items() if level != AlertLevel.NONE
            ])
            self.muted = True
        else:
            self.muted = False
            self._deliver([
                AudioEvent(name, level, AlertLevel.NONE)
                for name, level in self.levels.items() if level != AlertLevel.NONE
            ])
        return self.muted

    def _transition(self, levels: Dict[str, AlertLevel]) -> List[AudioEvent]:
        events = []
        for name, level in levels.items():
            previous = self.levels[name]
            if level != previous:
                self.levels[name] = level
                events.append(AudioEvent(name, level, previous))
        if events and not self.muted:
            self._deliver(events)
        return events

    def _deliver(self, events: List[AudioEvent]):
        if self.sink is None:
            return
        for event in events:
            logger.debug("Audio %s: %s -> %s", event.condition, event.previous.name, event.level.name)
            self.sink(event)
