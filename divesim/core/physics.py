"""
Diving physics formulas.

Simplified, illustrative models for surface-supplied diving:
- Ambient/absolute pressure: 1 bar at the surface plus 1 bar per 10 m.
- Umbilical supply: linear model, 10 bar at the surface plus 1 bar per 10 m.
- Cylinder consumption: pressure drop per simulated second = ATA * RMV / V.

All functions are pure. None of them return negative pressures, volumes or
times. Inputs must already be finite numbers (see utils.coerce_number).
"""

from divesim.core.constants import (
    LINE_LOSS_FACTOR,
    UMBILICAL_BASE_PRESSURE,
    UMBILICAL_PRESSURE_RANGE,
    RMV_L_MIN,
    CYLINDER_VOLUME_LITERS,
    START_PRESSURE_BAR,
    LOW_CYLINDER_THRESHOLD,
    LOW_PRESSURE_THRESHOLD,
    CYLINDER_VOLUME_ZONES,
    CYLINDER_PRESSURE_ZONES,
    DIVER_PRESSURE_ZONES,
    UMBILICAL_SAFE_MIN,
    UMBILICAL_SAFE_MAX,
    DIVER_DEPTH_GREEN_MAX,
    DIVER_DEPTH_ORANGE_MAX,
    ZoneBands,
    MetricTuning,
)
from divesim.core.enums import Zone
from divesim.core.utils import clamp

_METRICS = MetricTuning()


def ambient_pressure(depth: float) -> float:
    """Ambient pressure (bar) at depth (m): 1 + depth/10."""
    return 1.0 + depth / 10.0


def absolute_pressure_ata(depth: float) -> float:
    """Absolute pressure (ATA) at depth (m): depth/10 + 1."""
    return depth / 10.0 + 1.0


def total_air_consumption(rate1: float, rate2: float, depth: float) -> float:
    """
    Combined consumption of both divers (L/min) scaled by ambient pressure.
    """
    return max(0.0, (rate1 + rate2) * ambient_pressure(depth))


def umbilical_pressure(depth: float) -> float:
    """
    Umbilical supply pressure (bar) for the given depth.

    Linear model: 10 bar at the surface, +1 bar per 10 m, clamped to the
    umbilical gauge range.
    """
    pressure = UMBILICAL_BASE_PRESSURE + depth / 10.0
    return clamp(pressure, UMBILICAL_PRESSURE_RANGE.min, UMBILICAL_PRESSURE_RANGE.max)


def diver_pressure(umbilical: float, depth: float) -> float:
    """Pressure delivered at the diver after line loss along the umbilical."""
    return max(0.0, umbilical - LINE_LOSS_FACTOR * depth)


def remaining_dive_time(cyl1_volume: float, cyl2_volume: float, total_air_used: float) -> float:
    """
    Remaining dive time (min) from average cylinder volume and consumption.

    Returns 0 when nothing is being consumed.
    """
    if total_air_used == 0:
        return 0.0
    average_volume = (cyl1_volume + cyl2_volume) / 2.0
    return max(0.0, average_volume / total_air_used * 10.0)


def remaining_dive_time_realistic(
    remaining_pressure: float,
    depth: float,
    rmv: float = RMV_L_MIN,
    cylinder_liters: float = CYLINDER_VOLUME_LITERS,
) -> float:
    """
    Remaining dive time (min) = (pressure * cylinder volume) / (ATA * RMV).

    Args:
        remaining_pressure: Cylinder pressure (bar)
        depth: Current depth (m)
        rmv: Respiratory Minute Volume at the surface (L/min)
        cylinder_liters: Cylinder water volume (L)
    """
    if remaining_pressure <= 0:
        return 0.0
    consumption = absolute_pressure_ata(depth) * rmv
    if consumption <= 0:
        return 0.0
    return max(0.0, remaining_pressure * cylinder_liters / consumption)


def pressure_drop_per_second(
    depth: float,
    rmv: float = RMV_L_MIN,
    cylinder_liters: float = CYLINDER_VOLUME_LITERS,
) -> float:
    """
    Cylinder pressure drop (bar) per simulated second.

    One simulated second stands for one minute of breathing.
    """
    if cylinder_liters <= 0:
        return 0.0
    return max(0.0, absolute_pressure_ata(depth) * rmv / cylinder_liters)


def cylinder_pressure_after_tick(
    current_pressure: float,
    depth: float,
    elapsed_seconds: float = 1.0,
    rmv: float = RMV_L_MIN,
    cylinder_liters: float = CYLINDER_VOLUME_LITERS,
) -> float:
    """New cylinder pressure after elapsed_seconds of consumption at depth."""
    drop = pressure_drop_per_second(depth, rmv, cylinder_liters)
    return max(0.0, current_pressure - drop * max(0.0, elapsed_seconds))


def pressure_to_volume_percent(pressure: float, max_pressure: float = START_PRESSURE_BAR) -> float:
    """Convert cylinder pressure (bar) to remaining volume (%)."""
    if max_pressure <= 0:
        return 0.0
    return clamp(pressure / max_pressure * 100.0, 0.0, 100.0)


def cylinder_depletion(
    current_volume: float,
    air_used: float,
    cylinder_ratio: float,
    interval_seconds: float = 1.0,
) -> float:
    """
    Volume (%) left after one update when a fixed share of the combined
    consumption is drawn from this cylinder.
    """
    depletion = air_used * cylinder_ratio * interval_seconds / 60.0 / 100.0
    return max(0.0, current_volume - depletion)


def is_low_cylinder_volume(volume: float) -> bool:
    return volume <= LOW_CYLINDER_THRESHOLD


def is_low_umbilical_pressure(pressure: float) -> bool:
    return pressure <= LOW_PRESSURE_THRESHOLD


# Zone classification.

def _banded_zone(value: float, bands: ZoneBands) -> Zone:
    if value >= bands.green_min:
        return Zone.GREEN
    if value >= bands.orange_min:
        return Zone.ORANGE
    return Zone.RED


def umbilical_pressure_zone(pressure: float) -> Zone:
    if UMBILICAL_SAFE_MIN <= pressure <= UMBILICAL_SAFE_MAX:
        return Zone.GREEN
    return Zone.RED


def cylinder_volume_zone(volume: float) -> Zone:
    return _banded_zone(volume, CYLINDER_VOLUME_ZONES)


def cylinder_pressure_zone(pressure: float) -> Zone:
    return _banded_zone(pressure, CYLINDER_PRESSURE_ZONES)


def diver_pressure_zone(pressure: float) -> Zone:
    return _banded_zone(pressure, DIVER_PRESSURE_ZONES)


def diver_depth_zone(depth: float) -> Zone:
    if depth <= DIVER_DEPTH_GREEN_MAX:
        return Zone.GREEN
    if depth <= DIVER_DEPTH_ORANGE_MAX:
        return Zone.ORANGE
    return Zone.RED


def dive_time_zone(minutes: float) -> Zone:
    if minutes < _METRICS.dive_time_red_min:
        return Zone.RED
    if minutes < _METRICS.dive_time_orange_min:
        return Zone.ORANGE
    return Zone.GREEN


def consumption_zone(rate_l_min: float) -> Zone:
    if rate_l_min > _METRICS.consumption_red_l_min:
        return Zone.RED
    if rate_l_min > _METRICS.consumption_orange_l_min:
        return Zone.ORANGE
    return Zone.GREEN
