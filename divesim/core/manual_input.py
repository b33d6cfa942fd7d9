"""
Manual gauge entry.

Operator input arrives as text or numbers. Non-numeric input is ignored and
the previous value stays; numbers are clamped into range. Derived values are
recomputed before the call returns.
"""

import logging
from typing import Optional, Tuple, Union

from divesim.core.constants import SCALAR_RANGES, ValueRange
from divesim.core.enums import Mode
from divesim.core.physics import pressure_to_volume_percent
from divesim.core.utils import parse_number

logger = logging.getLogger(__name__)

# Cylinder volume gauges follow manually entered cylinder pressures.
_CYLINDER_VOLUME_FOR_PRESSURE = {
    "cylinder1_pressure": "cylinder1_volume",
    "cylinder2_pressure": "cylinder2_volume",
}

RangeLike = Union[ValueRange, Tuple[float, float]]


class ManualInputGateway:
    """Validated manual overrides for a DiveSimulation."""

    def __init__(self, sim, allow_in_auto: bool = False):
        self.sim = sim
        self.allow_in_auto = allow_in_auto

    def set_manual_value(self, field: str, raw, value_range: Optional[RangeLike] = None) -> bool:
        """
        Write an operator value into a gauge.

        Args:
            field: Gauge field name (see constants.SCALAR_RANGES)
            raw: Number or text as typed by the operator
            value_range: Optional override of the field's range

        Returns:
            True if the value was written, False if it was ignored.
        """
        if field not in SCALAR_RANGES:
            raise KeyError(f"Unknown gauge field: {field}")
        if self.sim.state.mode == Mode.AUTO and not self.allow_in_auto:
            logger.debug("Ignoring manual %s=%r in auto mode", field, raw)
            return False

        value = parse_number(raw)
        if value is None:
            logger.debug("Ignoring non-numeric input for %s: %r", field, raw)
            return False

        bounds = _as_range(value_range) if value_range is not None else SCALAR_RANGES[field]
        value = bounds.clamp(value)
        self.sim.set_scalar(field, value)

        volume_field = _CYLINDER_VOLUME_FOR_PRESSURE.get(field)
        if volume_field is not None:
            pressure = getattr(self.sim.state, field)
            self.sim.set_scalar(
                volume_field,
                pressure_to_volume_percent(pressure, self.sim.config.start_pressure),
            )

        self.sim.recompute_derived()
        return True

    def set_umbilical_pressure(self, raw) -> bool:
        return self.set_manual_value("umbilical_pressure", raw)

    def set_diver1_pressure(self, raw) -> bool:
        return self.set_manual_value("diver1_pressure", raw)

    def set_diver2_pressure(self, raw) -> bool:
        return self.set_manual_value("diver2_pressure", raw)

    def set_cylinder1_pressure(self, raw) -> bool:
        return self.set_manual_value("cylinder1_pressure", raw)

    def set_cylinder2_pressure(self, raw) -> bool:
        return self.set_manual_value("cylinder2_pressure", raw)


def _as_range(value_range: RangeLike) -> ValueRange:
    if isinstance(value_range, ValueRange):
        return value_range
    low, high = value_range
    if low > high:
        low, high = high, low
    return ValueRange(low, high)
