"""
Physics update strategies for auto mode.

Both strategies implement `advance(state, elapsed_seconds) -> StateDelta`.
They read the current state, never mutate it, and leave rounding and
clamping to the engine.

Each tick advances one simulated second of gas consumption.
"""

from divesim.core.physics import (
    absolute_pressure_ata,
    ambient_pressure,
    cylinder_pressure_after_tick,
    diver_pressure,
    pressure_to_volume_percent,
    remaining_dive_time_realistic,
    umbilical_pressure,
)
from divesim.core.state import DiveState, SimulationConfig, StateDelta
from divesim.core.utils import clamp

SIM_SECONDS_PER_TICK = 1.0


class ScriptedDiveProfile:
    """
    Scripted depth profile shared by both divers.

    Depth steps down by `stage_depth_step` every `stage_seconds` of session
    time until `profile_max_depth`, then back up at the same pace and stays
    at the surface.
    """
    name = "scripted"

    def __init__(self, config: SimulationConfig):
        self.config = config

    def depth_at(self, elapsed_seconds: float) -> float:
        c = self.config
        if c.stage_seconds <= 0 or c.stage_depth_step <= 0:
            return 0.0
        stage = int(max(0.0, elapsed_seconds) // c.stage_seconds)
        peak_stage = int(round(c.profile_max_depth / c.stage_depth_step))
        if stage <= peak_stage:
            depth = stage * c.stage_depth_step
        else:
            depth = c.profile_max_depth - (stage - peak_stage) * c.stage_depth_step
        return clamp(depth, 0.0, c.profile_max_depth)

    def advance(self, state: DiveState, elapsed_seconds: float) -> StateDelta:
        c = self.config
        depth = self.depth_at(elapsed_seconds)

        p1 = cylinder_pressure_after_tick(
            state.cylinder1_pressure, depth, SIM_SECONDS_PER_TICK, c.rmv, c.cylinder_liters
        )
        p2 = cylinder_pressure_after_tick(
            state.cylinder2_pressure, depth, SIM_SECONDS_PER_TICK, c.rmv, c.cylinder_liters
        )
        umbilical = umbilical_pressure(depth)
        at_diver = diver_pressure(umbilical, depth)

        return StateDelta(
            depth=depth,
            diver1_depth=depth,
            diver2_depth=depth,
            umbilical_pressure=umbilical,
            diver1_pressure=at_diver,
            diver2_pressure=at_diver,
            cylinder1_pressure=p1,
            cylinder2_pressure=p2,
            cylinder1_volume=pressure_to_volume_percent(p1, c.start_pressure),
            cylinder2_volume=pressure_to_volume_percent(p2, c.start_pressure),
            ambient_pressure=ambient_pressure(depth),
            total_air_used=absolute_pressure_ata(depth) * c.rmv,
            remaining_dive_time=remaining_dive_time_realistic(
                (p1 + p2) / 2.0, depth, c.rmv, c.cylinder_liters
            ),
        )


class SimpleDiveProfile:
    """
    Operator-driven profile: depths stay where they were set.

    Cylinder N is breathed by diver N at that diver's depth, using the
    diver's consumption rate as RMV.
    """
    name = "simple"

    def __init__(self, config: SimulationConfig):
        self.config = config

    def advance(self, state: DiveState, elapsed_seconds: float) -> StateDelta:
        c = self.config
        p1 = cylinder_pressure_after_tick(
            state.cylinder1_pressure, state.diver1_depth, SIM_SECONDS_PER_TICK,
            state.diver1_rate, c.cylinder_liters
        )
        p2 = cylinder_pressure_after_tick(
            state.cylinder2_pressure, state.diver2_depth, SIM_SECONDS_PER_TICK,
            state.diver2_rate, c.cylinder_liters
        )
        umbilical = umbilical_pressure(state.depth)

        total = (
            absolute_pressure_ata(state.diver1_depth) * state.diver1_rate
            + absolute_pressure_ata(state.diver2_depth) * state.diver2_rate
        ) / 2.0
        mean_depth = (state.diver1_depth + state.diver2_depth) / 2.0
        mean_rate = (state.diver1_rate + state.diver2_rate) / 2.0

        return StateDelta(
            umbilical_pressure=umbilical,
            diver1_pressure=diver_pressure(umbilical, state.diver1_depth),
            diver2_pressure=diver_pressure(umbilical, state.diver2_depth),
            cylinder1_pressure=p1,
            cylinder2_pressure=p2,
            cylinder1_volume=pressure_to_volume_percent(p1, c.start_pressure),
            cylinder2_volume=pressure_to_volume_percent(p2, c.start_pressure),
            ambient_pressure=ambient_pressure(state.depth),
            total_air_used=total,
            remaining_dive_time=remaining_dive_time_realistic(
                (p1 + p2) / 2.0, mean_depth, mean_rate, c.cylinder_liters
            ),
        )


PROFILE_STRATEGIES = {
    True: ScriptedDiveProfile,
    False: SimpleDiveProfile,
}
