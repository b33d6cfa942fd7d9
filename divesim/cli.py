import argparse
import json
import logging
import sys

from divesim.core.engine import DiveSimulation
from divesim.core.enums import Mode
from divesim.core.metrics import session_summary
from divesim.core.scheduler import TickScheduler
from divesim.core.state import SimulationConfig, DiveState
from divesim.core.timers import QtTimerService, VirtualTimerService
from divesim.monitors.audio import AudioAlertMonitor, AudioEvent

logger = logging.getLogger(__name__)


def load_config(path: str) -> SimulationConfig:
    with open(path, 'r') as f:
        return SimulationConfig.from_dict(json.load(f))


def format_status(sim: DiveSimulation, state: DiveState) -> str:
    elapsed = int(sim.elapsed_seconds())
    alerts = ", ".join(a.message for a in state.alerts) or "-"
    return (
        f"{elapsed // 3600:02d}:{(elapsed % 3600) // 60:02d}:{elapsed % 60:02d} | "
        f"Depth: {state.depth:.1f}m | Umb: {state.umbilical_pressure:.2f}bar | "
        f"Cyl: {state.cylinder1_volume:.1f}%/{state.cylinder2_volume:.1f}% | "
        f"Remaining: {state.remaining_dive_time:.1f}min | Alerts: {alerts}"
    )


def build_simulation(config: SimulationConfig, timers):
    sim = DiveSimulation(config, timers=timers)
    scheduler = TickScheduler(sim)
    scheduler.attach()
    return sim, scheduler


def run_headless(args):
    """Run the auto simulation without a UI."""
    config = SimulationConfig()
    if args.config:
        try:
            config = load_config(args.config)
            logger.info("Loaded config from %s", args.config)
        except (OSError, ValueError, TypeError) as e:
            print(f"Error loading config: {e}")
            sys.exit(1)
    if args.simple:
        config.use_realistic_profile = False

    if args.fast:
        timers = VirtualTimerService()
    else:
        from PySide6.QtCore import QCoreApplication
        app = QCoreApplication.instance() or QCoreApplication(sys.argv)
        timers = QtTimerService()

    sim, scheduler = build_simulation(config, timers)

    def on_audio(event: AudioEvent):
        print(f"  [audio] {event.condition}: {event.previous.name} -> {event.level.name}")

    audio = AudioAlertMonitor(sim, sink=on_audio)
    audio.attach()

    print(f"Starting Headless Simulation (Duration: {args.duration}s)...")
    sim.set_mode(Mode.AUTO)
    if args.leak_at is not None:
        timers.call_later(args.leak_at, sim.trigger_leak)
    sim.start_simulation()
    # Scheduled after the tick driver, so each line shows the finished tick.
    reporter = timers.call_every(
        config.tick_interval, lambda: print(format_status(sim, sim.state))
    )

    if args.fast:
        timers.advance(args.duration)
    else:
        timers.call_later(args.duration, app.quit)
        app.exec()

    reporter.cancel()
    sim.pause_simulation()
    scheduler.detach()
    audio.detach()

    summary = session_summary(sim.get_latest_state())
    print(
        f"Simulation completed: {scheduler.tick_count} ticks, {scheduler.error_count} errors. "
        f"Max depth {summary['depth']['max']:.1f}m, "
        f"mean umbilical {summary['umbilical_pressure']['mean']:.2f}bar"
    )


def main():
    parser = argparse.ArgumentParser(description="DiveSim - Surface-Supplied Dive Simulator")
    parser.add_argument("--duration", type=float, default=60.0, help="Simulated session length in seconds")
    parser.add_argument("--config", type=str, help="Path to JSON configuration file")
    parser.add_argument("--simple", action="store_true", help="Use operator depths instead of the scripted profile")
    parser.add_argument("--fast", action="store_true", help="Run on a virtual clock instead of real time")
    parser.add_argument("--leak-at", type=float, default=None, help="Trigger an air leak after N seconds")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    run_headless(args)


if __name__ == "__main__":
    main()
