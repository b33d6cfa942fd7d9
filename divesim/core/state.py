from collections import deque
from dataclasses import dataclass, field, fields
from typing import Deque, Dict, List, Optional

from divesim.core.constants import (
    INITIAL_SCALARS,
    DEFAULT_SELECTED_CYLINDER,
    RMV_L_MIN,
    CYLINDER_VOLUME_LITERS,
    START_PRESSURE_BAR,
)
from divesim.core.enums import Mode, AlertType

HISTORY_LENGTH = 60


@dataclass
class SimulationConfig:
    """Configuration for the simulation engine."""
    tick_interval: float = 1.0  # Real seconds per tick
    alert_timeout: float = 10.0  # Warning auto-dismiss (seconds)
    history_length: int = HISTORY_LENGTH

    # Physics parameters.
    rmv: float = RMV_L_MIN  # L/min at the surface
    cylinder_liters: float = CYLINDER_VOLUME_LITERS
    start_pressure: float = START_PRESSURE_BAR

    # Scripted dive profile.
    use_realistic_profile: bool = True
    stage_seconds: float = 10.0  # Length of one profile stage
    stage_depth_step: float = 10.0  # Depth change per stage (m)
    profile_max_depth: float = 40.0

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        """Build a config from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class Alert:
    """Entry of the alert list."""
    id: str
    type: AlertType
    message: str
    created_at: float


@dataclass(frozen=True)
class HistoryPoint:
    time: float
    value: float


@dataclass
class StateDelta:
    """
    Result of one physics update. Fields left as None are unchanged.
    """
    depth: Optional[float] = None
    diver1_depth: Optional[float] = None
    diver2_depth: Optional[float] = None
    umbilical_pressure: Optional[float] = None
    diver1_pressure: Optional[float] = None
    diver2_pressure: Optional[float] = None
    cylinder1_volume: Optional[float] = None
    cylinder2_volume: Optional[float] = None
    cylinder1_pressure: Optional[float] = None
    cylinder2_pressure: Optional[float] = None
    ambient_pressure: Optional[float] = None
    total_air_used: Optional[float] = None
    remaining_dive_time: Optional[float] = None

    def changes(self) -> Dict[str, float]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def _history() -> Deque:
    return deque(maxlen=HISTORY_LENGTH)


@dataclass(slots=True)
class DiveState:
    """Snapshot of the dashboard state at a specific time."""
    # Mode and control.
    mode: Mode = Mode.MANUAL
    is_running: bool = False
    session_start_time: Optional[float] = None
    use_realistic_profile: bool = True
    selected_cylinder: str = DEFAULT_SELECTED_CYLINDER

    # Dive parameters (m, L/min).
    depth: float = INITIAL_SCALARS["depth"]
    diver1_depth: float = INITIAL_SCALARS["diver1_depth"]
    diver2_depth: float = INITIAL_SCALARS["diver2_depth"]
    diver1_rate: float = INITIAL_SCALARS["diver1_rate"]
    diver2_rate: float = INITIAL_SCALARS["diver2_rate"]

    # Gauges (bar, %).
    umbilical_pressure: float = INITIAL_SCALARS["umbilical_pressure"]
    diver1_pressure: float = INITIAL_SCALARS["diver1_pressure"]
    diver2_pressure: float = INITIAL_SCALARS["diver2_pressure"]
    cylinder1_volume: float = INITIAL_SCALARS["cylinder1_volume"]
    cylinder2_volume: float = INITIAL_SCALARS["cylinder2_volume"]
    cylinder1_pressure: float = INITIAL_SCALARS["cylinder1_pressure"]
    cylinder2_pressure: float = INITIAL_SCALARS["cylinder2_pressure"]

    # Derived values.
    ambient_pressure: float = 0.0  # bar
    total_air_used: float = 0.0  # L/min
    remaining_dive_time: float = 0.0  # min

    # Histories (bounded, oldest first).
    depth_history: Deque[HistoryPoint] = field(default_factory=_history)
    pressure_history: Deque[HistoryPoint] = field(default_factory=_history)
    time_history: Deque[float] = field(default_factory=_history)

    # Alerts in insertion order.
    alerts: List[Alert] = field(default_factory=list)

    def copy(self) -> "DiveState":
        """Independent copy; containers are duplicated, records are frozen."""
        clone = DiveState(**{f.name: getattr(self, f.name) for f in fields(self)})
        clone.depth_history = deque(self.depth_history, maxlen=self.depth_history.maxlen)
        clone.pressure_history = deque(self.pressure_history, maxlen=self.pressure_history.maxlen)
        clone.time_history = deque(self.time_history, maxlen=self.time_history.maxlen)
        clone.alerts = list(self.alerts)
        return clone
