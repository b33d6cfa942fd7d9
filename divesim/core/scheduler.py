import logging
from typing import Optional

from divesim.core.enums import Mode
from divesim.core.state import DiveState
from divesim.core.timers import TimerHandle

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Periodic driver of the auto simulation.

    Idle -> Ticking when the state becomes auto + running; Ticking -> Idle on
    manual mode or pause. Start/stop follows state-change notifications, so
    the scheduler must be attached to the simulation it drives.

    Each firing runs, in order: advance_tick, recompute_derived,
    append_history, alert evaluation. Errors are logged and the next firing
    proceeds normally. Missed firings are not replayed.
    """
    def __init__(self, sim, timers=None, interval: Optional[float] = None):
        self.sim = sim
        self.timers = timers or sim.timers
        self.interval = interval or sim.config.tick_interval

        self.tick_count = 0
        self.error_count = 0

        self._handle: Optional[TimerHandle] = None
        self._in_tick = False
        self._unsubscribe = None

    @property
    def is_ticking(self) -> bool:
        return self._handle is not None and self._handle.active

    def attach(self):
        """Follow the simulation's state changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.sim.subscribe(self.on_state_change)
        self.on_state_change(self.sim.state)

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.stop()

    def on_state_change(self, state: DiveState):
        should_tick = state.mode == Mode.AUTO and state.is_running
        if should_tick and not self.is_ticking:
            self.start()
        elif not should_tick and self.is_ticking:
            self.stop()

    def start(self):
        if self.is_ticking:
            return
        self._handle = self.timers.call_every(self.interval, self._on_timer)
        logger.debug("Tick scheduler started (%.2fs interval)", self.interval)

    def stop(self):
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.debug("Tick scheduler stopped after %d ticks", self.tick_count)

    def _on_timer(self):
        if self._in_tick:
            logger.debug("Skipping overlapping tick")
            return
        state = self.sim.state
        if state.mode != Mode.AUTO or not state.is_running:
            self.stop()
            return

        self._in_tick = True
        try:
            self.tick()
        except Exception:
            self.error_count += 1
            logger.exception("Error during simulation update")
        finally:
            self._in_tick = False

    def tick(self, now: Optional[float] = None):
        """Run one update cycle. `now` is read once and shared by all steps."""
        now = self.timers.now() if now is None else now
        self.sim.advance_tick(now)
        self.sim.recompute_derived()
        self.sim.append_history(now)
        self.sim.alerts.evaluate()
        self.tick_count += 1
