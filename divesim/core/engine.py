import logging
from collections import deque
from typing import Callable, List, Optional, Union

from divesim.core.constants import (
    SCALAR_RANGES,
    INITIAL_SCALARS,
    GAUGE_FIELDS,
    CYLINDER_SELECTIONS,
    LEAK_UMBILICAL_DROP,
    LEAK_DIVER1_DROP,
    ALERT_MESSAGE_EMERGENCY_LEAK,
)
from divesim.core.enums import Mode, AlertType
from divesim.core.physics import (
    ambient_pressure,
    total_air_consumption,
    remaining_dive_time,
)
from divesim.core.profiles import PROFILE_STRATEGIES
from divesim.core.state import (
    Alert,
    DiveState,
    HistoryPoint,
    SimulationConfig,
    StateDelta,
)
from divesim.core.timers import QtTimerService
from divesim.core.utils import coerce_number, round_to
from divesim.monitors.alerts import AlertEngine

logger = logging.getLogger(__name__)

# Decimal places kept for tick values and for every derived-value recompute.
# Bar pressures and consumption: 2. Depths, volumes and times: 1.
TICK_ROUNDING = {
    "depth": 1,
    "diver1_depth": 1,
    "diver2_depth": 1,
    "umbilical_pressure": 2,
    "diver1_pressure": 2,
    "diver2_pressure": 2,
    "cylinder1_pressure": 2,
    "cylinder2_pressure": 2,
    "cylinder1_volume": 1,
    "cylinder2_volume": 1,
    "ambient_pressure": 2,
    "total_air_used": 2,
    "remaining_dive_time": 1,
}

StateListener = Callable[[DiveState], None]


class DiveSimulation:
    """
    Owner of the dashboard state.

    All mutation goes through this object's methods; every mutation notifies
    subscribers with a fresh snapshot.

    State management:
    - `self.state` is the live state; `get_latest_state()` returns a copy.
    - `self.alerts` raises and dismisses alerts inside `self.state.alerts`.
    - Physics runs only in auto mode while running (`advance_tick`); the
      TickScheduler decides when to call it.
    """
    def __init__(self, config: Optional[SimulationConfig] = None, timers=None):
        self.config = config or SimulationConfig()
        self.timers = timers or QtTimerService()
        self.state = self._initial_state()

        self.alerts = AlertEngine(self, self.timers, timeout=self.config.alert_timeout)
        self.profiles = {flag: cls(self.config) for flag, cls in PROFILE_STRATEGIES.items()}

        self._subscribers: List[StateListener] = []

        # Pause bookkeeping so paused wall-clock time is not counted.
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0

        self._recompute_derived()

    def _initial_state(self) -> DiveState:
        state = DiveState(use_realistic_profile=self.config.use_realistic_profile)
        length = self.config.history_length
        state.depth_history = deque(maxlen=length)
        state.pressure_history = deque(maxlen=length)
        state.time_history = deque(maxlen=length)
        return state

    # Read interface.

    def get_latest_state(self) -> DiveState:
        """Return an independent snapshot of the current state."""
        return self.state.copy()

    def subscribe(self, callback: StateListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._subscribers.append(callback)

        def _unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _notify(self):
        if not self._subscribers:
            return
        snapshot = self.get_latest_state()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("State listener %r failed", callback)

    # Scalar setters.

    def set_scalar(self, field: str, value: float):
        """Clamp value into the field's range and store it. Derived values are untouched."""
        if field not in SCALAR_RANGES:
            raise KeyError(f"Unknown gauge field: {field}")
        setattr(self.state, field, SCALAR_RANGES[field].clamp(coerce_number(value)))
        self._notify()

    def _set_input(self, field: str, value: float):
        """Operator edit: in manual mode derived values follow immediately."""
        self.set_scalar(field, value)
        if self.state.mode == Mode.MANUAL:
            self.recompute_derived()

    def set_depth(self, depth: float):
        self._set_input("depth", depth)

    def set_diver1_depth(self, depth: float):
        self._set_input("diver1_depth", depth)

    def set_diver2_depth(self, depth: float):
        self._set_input("diver2_depth", depth)

    def set_diver1_rate(self, rate: float):
        self._set_input("diver1_rate", rate)

    def set_diver2_rate(self, rate: float):
        self._set_input("diver2_rate", rate)

    def set_umbilical_pressure(self, pressure: float):
        self._set_input("umbilical_pressure", pressure)

    def set_diver1_pressure(self, pressure: float):
        self._set_input("diver1_pressure", pressure)

    def set_diver2_pressure(self, pressure: float):
        self._set_input("diver2_pressure", pressure)

    def set_cylinder1_volume(self, volume: float):
        self._set_input("cylinder1_volume", volume)

    def set_cylinder2_volume(self, volume: float):
        self._set_input("cylinder2_volume", volume)

    def set_cylinder1_pressure(self, pressure: float):
        self._set_input("cylinder1_pressure", pressure)

    def set_cylinder2_pressure(self, pressure: float):
        self._set_input("cylinder2_pressure", pressure)

    def set_selected_cylinder(self, selection: str):
        """Select which cylinder the metric view highlights. Physics is unaffected."""
        if selection not in CYLINDER_SELECTIONS:
            raise ValueError(f"Unknown cylinder selection: {selection}")
        self.state.selected_cylinder = selection
        self._notify()

    def set_use_realistic_profile(self, enabled: bool):
        self.state.use_realistic_profile = bool(enabled)
        self._notify()

    # Mode state machine.

    def set_mode(self, mode: Union[Mode, str]):
        """
        Switch between manual and auto mode.

        Either switch leaves the simulation paused: manual mode must never
        tick, and auto mode waits for an explicit start.
        """
        new_mode = mode if isinstance(mode, Mode) else Mode(mode)
        if self.state.is_running:
            self._pause(self.timers.now())
        if new_mode != self.state.mode:
            logger.info("Mode %s -> %s", self.state.mode.value, new_mode.value)
        self.state.mode = new_mode
        self._notify()

    def start_simulation(self):
        """Start, or resume after a pause, keeping the original session start."""
        if self.state.is_running:
            return
        now = self.timers.now()
        if self.state.session_start_time is None:
            self.state.session_start_time = now
            self._paused_total = 0.0
            logger.info("Simulation started")
        else:
            logger.info("Simulation resumed")
        if self._paused_at is not None:
            self._paused_total += max(0.0, now - self._paused_at)
            self._paused_at = None
        self.state.is_running = True
        self._notify()

    def pause_simulation(self):
        if not self.state.is_running:
            return
        self._pause(self.timers.now())
        logger.info("Simulation paused")
        self._notify()

    def _pause(self, now: float):
        self.state.is_running = False
        if self.state.session_start_time is not None:
            self._paused_at = now

    def elapsed_seconds(self, now: Optional[float] = None) -> float:
        """Session time excluding pauses; frozen while paused."""
        start = self.state.session_start_time
        if start is None:
            return 0.0
        if self._paused_at is not None:
            end = self._paused_at
        else:
            end = self.timers.now() if now is None else now
        return max(0.0, end - start - self._paused_total)

    # Physics.

    def advance_tick(self, now: Optional[float] = None):
        """
        Advance the physics by one tick.

        No-op unless in auto mode and running. The active profile strategy
        computes the new values from the current state and session time.
        """
        if self.state.mode != Mode.AUTO or not self.state.is_running:
            return
        now = self.timers.now() if now is None else now
        elapsed = self.elapsed_seconds(now)
        strategy = self.profiles[self.state.use_realistic_profile]
        self._apply_delta(strategy.advance(self.state, elapsed))
        self._notify()

    def _apply_delta(self, delta: StateDelta):
        for name, value in delta.changes().items():
            value = coerce_number(value)
            decimals = TICK_ROUNDING.get(name)
            if decimals is not None:
                value = round_to(value, decimals)
            value_range = SCALAR_RANGES.get(name)
            if value_range is not None:
                value = value_range.clamp(value)
            setattr(self.state, name, max(0.0, value))

    def recompute_derived(self):
        """Recompute ambient pressure, total consumption and remaining time."""
        if self._recompute_derived():
            self._notify()

    def _recompute_derived(self) -> bool:
        s = self.state
        depth = coerce_number(s.depth)
        total = total_air_consumption(
            coerce_number(s.diver1_rate), coerce_number(s.diver2_rate), depth
        )
        derived = (
            round_to(ambient_pressure(depth), TICK_ROUNDING["ambient_pressure"]),
            round_to(total, TICK_ROUNDING["total_air_used"]),
            round_to(
                remaining_dive_time(
                    coerce_number(s.cylinder1_volume), coerce_number(s.cylinder2_volume), total
                ),
                TICK_ROUNDING["remaining_dive_time"],
            ),
        )
        if derived == (s.ambient_pressure, s.total_air_used, s.remaining_dive_time):
            return False
        s.ambient_pressure, s.total_air_used, s.remaining_dive_time = derived
        return True

    def append_history(self, now: Optional[float] = None):
        """Record depth and umbilical pressure; oldest entries drop out."""
        now = self.timers.now() if now is None else now
        self.state.depth_history.append(HistoryPoint(now, self.state.depth))
        self.state.pressure_history.append(HistoryPoint(now, self.state.umbilical_pressure))
        self.state.time_history.append(now)
        self._notify()

    # Events.

    def trigger_leak(self):
        """Simulate an umbilical air leak."""
        s = self.state
        s.umbilical_pressure = max(0.0, s.umbilical_pressure - LEAK_UMBILICAL_DROP)
        s.diver1_pressure = max(0.0, s.diver1_pressure - LEAK_DIVER1_DROP)
        logger.warning(
            "Air leak: umbilical %.2f bar, diver 1 %.2f bar",
            s.umbilical_pressure, s.diver1_pressure
        )
        self._notify()
        self.alerts.add_alert(AlertType.CRITICAL, ALERT_MESSAGE_EMERGENCY_LEAK)

    def dismiss_alert(self, alert_id: str) -> bool:
        return self.alerts.dismiss(alert_id)

    # Reset.

    def reset_all_gauges(self):
        """
        Restore gauges, clear histories, alerts and the session timer.

        Depth and consumption rates are operator inputs and keep their values;
        derived values are recomputed from the restored gauges. Mode is kept.
        """
        s = self.state
        s.is_running = False
        for name in GAUGE_FIELDS:
            setattr(s, name, INITIAL_SCALARS[name])
        s.depth_history.clear()
        s.pressure_history.clear()
        s.time_history.clear()
        s.session_start_time = None
        self._paused_at = None
        self._paused_total = 0.0
        self.alerts.clear_all()
        self._recompute_derived()
        logger.info("Gauges reset")
        self._notify()

    def reset_simulation(self):
        """Restore the whole initial state, keeping only the mode."""
        mode = self.state.mode
        self.alerts.clear_all()
        self.state = self._initial_state()
        self.state.mode = mode
        self._paused_at = None
        self._paused_total = 0.0
        self._recompute_derived()
        logger.info("Simulation reset")
        self._notify()

    # Alert list mutation (used by AlertEngine).

    def _attach_alert(self, alert: Alert):
        self.state.alerts.append(alert)
        self._notify()

    def _detach_alert(self, alert_id: str) -> bool:
        alerts = self.state.alerts
        for i, alert in enumerate(alerts):
            if alert.id == alert_id:
                del alerts[i]
                self._notify()
                return True
        return False

    def _clear_alerts(self):
        if self.state.alerts:
            self.state.alerts.clear()
            self._notify()
