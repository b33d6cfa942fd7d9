"""
Physical and Numerical Constants for DiveSim.

This module centralizes gauge ranges, alert thresholds and initial values
used throughout the simulation.

NOTE: Only add constants here that are ACTIVELY IMPORTED elsewhere.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValueRange:
    """Inclusive [min, max] range of a gauge."""
    min: float
    max: float

    def clamp(self, value: float) -> float:
        return max(self.min, min(self.max, value))


# Physics constants (used in physics.py).

# Pressure loss along the umbilical per meter of depth (bar/m)
LINE_LOSS_FACTOR = 0.5

# Surface umbilical supply pressure (bar); +1 bar per 10 m
UMBILICAL_BASE_PRESSURE = 10.0

# Fixed split of consumption between cylinders for ratio-based depletion
CYLINDER_1_RATIO = 0.6
CYLINDER_2_RATIO = 0.4

# Respiratory Minute Volume at the surface (L/min)
RMV_L_MIN = 15.0

# Water volume of each supply cylinder (L)
CYLINDER_VOLUME_LITERS = 50.0

# Full cylinder pressure (bar)
START_PRESSURE_BAR = 200.0

# Gauge ranges.
DEPTH_RANGE = ValueRange(0.0, 40.0)  # meters
DIVER_DEPTH_RANGE = ValueRange(0.0, 40.0)  # meters
CONSUMPTION_RANGE = ValueRange(10.0, 50.0)  # L/min
UMBILICAL_PRESSURE_RANGE = ValueRange(0.0, 30.0)  # bar
DIVER_PRESSURE_RANGE = ValueRange(0.0, 250.0)  # bar
CYLINDER_VOLUME_RANGE = ValueRange(0.0, 100.0)  # percent
CYLINDER_PRESSURE_RANGE = ValueRange(0.0, 200.0)  # bar

SCALAR_RANGES = {
    "depth": DEPTH_RANGE,
    "diver1_depth": DIVER_DEPTH_RANGE,
    "diver2_depth": DIVER_DEPTH_RANGE,
    "diver1_rate": CONSUMPTION_RANGE,
    "diver2_rate": CONSUMPTION_RANGE,
    "umbilical_pressure": UMBILICAL_PRESSURE_RANGE,
    "diver1_pressure": DIVER_PRESSURE_RANGE,
    "diver2_pressure": DIVER_PRESSURE_RANGE,
    "cylinder1_volume": CYLINDER_VOLUME_RANGE,
    "cylinder2_volume": CYLINDER_VOLUME_RANGE,
    "cylinder1_pressure": CYLINDER_PRESSURE_RANGE,
    "cylinder2_pressure": CYLINDER_PRESSURE_RANGE,
}

# Initial gauge values (restored by reset).
INITIAL_SCALARS = {
    "depth": 20.0,
    "diver1_depth": 0.0,
    "diver2_depth": 0.0,
    "diver1_rate": 20.0,
    "diver2_rate": 25.0,
    "umbilical_pressure": 10.0,
    "diver1_pressure": 180.0,
    "diver2_pressure": 180.0,
    "cylinder1_volume": 100.0,
    "cylinder2_volume": 100.0,
    "cylinder1_pressure": 200.0,
    "cylinder2_pressure": 200.0,
}

# Fields restored by reset_all_gauges (depth and rates are operator inputs).
GAUGE_FIELDS = (
    "umbilical_pressure",
    "diver1_pressure",
    "diver2_pressure",
    "cylinder1_volume",
    "cylinder2_volume",
    "cylinder1_pressure",
    "cylinder2_pressure",
)

DEFAULT_SELECTED_CYLINDER = "Both"
CYLINDER_SELECTIONS = ("Both", "Cylinder 1", "Cylinder 2")

# Alert thresholds (used in alerts.py).

LOW_CYLINDER_THRESHOLD = 20.0  # percent
LOW_PRESSURE_THRESHOLD = 10.0  # bar

# Emergency leak drops (bar)
LEAK_UMBILICAL_DROP = 5.0
LEAK_DIVER1_DROP = 10.0

ALERT_MESSAGE_LOW_CYLINDER = "Low Air Warning: Cylinder volume below 20%"
ALERT_MESSAGE_LOW_PRESSURE = "Low Air Warning: Umbilical pressure below 10 bar"
ALERT_MESSAGE_EMERGENCY_LEAK = "Emergency: Air leak detected"


@dataclass(frozen=True)
class ZoneBands:
    """Lower bounds of the green and orange bands of a gauge."""
    green_min: float
    orange_min: float


CYLINDER_VOLUME_ZONES = ZoneBands(green_min=50.0, orange_min=20.0)
CYLINDER_PRESSURE_ZONES = ZoneBands(green_min=140.0, orange_min=80.0)
DIVER_PRESSURE_ZONES = ZoneBands(green_min=150.0, orange_min=100.0)

# Umbilical supply is only safe inside a band; both sides are red.
UMBILICAL_SAFE_MIN = 7.0
UMBILICAL_SAFE_MAX = 20.0

# Depth gauge upper bounds of the green and orange bands (meters).
DIVER_DEPTH_GREEN_MAX = 20.0
DIVER_DEPTH_ORANGE_MAX = 30.0


@dataclass(frozen=True)
class AudioTuning:
    """Thresholds for the audible alert conditions."""
    cylinder_warning_bar: float = 20.0
    cylinder_critical_bar: float = 10.0

    umbilical_safe_min: float = 7.0
    umbilical_safe_max: float = 20.0
    umbilical_critical_min: float = 3.0
    umbilical_critical_max: float = 25.0

    dive_time_warning_min: float = 5.0
    dive_time_critical_min: float = 2.0


@dataclass(frozen=True)
class MetricTuning:
    """Color bands of the metrics panel."""
    dive_time_red_min: float = 5.0
    dive_time_orange_min: float = 15.0
    consumption_orange_l_min: float = 50.0
    consumption_red_l_min: float = 80.0
