import itertools
import logging
from typing import TYPE_CHECKING, Dict, Optional

from divesim.core.constants import (
    ALERT_MESSAGE_LOW_CYLINDER,
    ALERT_MESSAGE_LOW_PRESSURE,
)
from divesim.core.enums import AlertType
from divesim.core.physics import is_low_cylinder_volume, is_low_umbilical_pressure
from divesim.core.state import Alert, DiveState
from divesim.core.timers import TimerHandle

if TYPE_CHECKING:
    from divesim.core.engine import DiveSimulation

logger = logging.getLogger(__name__)


class AlertEngine:
    """
    Threshold alert system for the dashboard.

    - One alert per message; adding a duplicate is a no-op.
    - Warning alerts dismiss themselves after `timeout` seconds.
    - Critical alerts stay until their condition clears or the operator
      dismisses them.

    The alert list itself lives in the simulation state; this class keeps the
    dismiss timers, keyed by alert id.
    """
    def __init__(self, sim: "DiveSimulation", timers, timeout: float = 10.0):
        self.sim = sim
        self.timers = timers
        self.timeout = timeout
        self._ids = itertools.count(1)
        self._dismiss_timers: Dict[str, TimerHandle] = {}

    def active_conditions(self, state: Optional[DiveState] = None) -> Dict[str, bool]:
        """Current value of each threshold condition, keyed by alert message."""
        state = state or self.sim.state
        return {
            ALERT_MESSAGE_LOW_CYLINDER: (
                is_low_cylinder_volume(state.cylinder1_volume)
                or is_low_cylinder_volume(state.cylinder2_volume)
            ),
            ALERT_MESSAGE_LOW_PRESSURE: is_low_umbilical_pressure(state.umbilical_pressure),
        }

    def evaluate(self):
        """Raise warnings for new conditions and drop alerts whose condition cleared."""
        for message, active in self.active_conditions().items():
            existing = self.find(message)
            if active and existing is None:
                self.add_alert(AlertType.WARNING, message)
            elif not active and existing is not None:
                self.remove_alert(existing.id)

    def find(self, message: str) -> Optional[Alert]:
        for alert in self.sim.state.alerts:
            if alert.message == message:
                return alert
        return None

    def add_alert(self, alert_type: AlertType, message: str) -> Optional[Alert]:
        """Add an alert unless one with the same message is already listed."""
        if self.find(message) is not None:
            return None

        alert = Alert(
            id=f"alert-{next(self._ids)}",
            type=alert_type,
            message=message,
            created_at=self.timers.now(),
        )
        if alert_type == AlertType.WARNING:
            self._dismiss_timers[alert.id] = self.timers.call_later(
                self.timeout, lambda: self._expire(alert.id)
            )
        logger.info("Alert %s raised (%s): %s", alert.id, alert_type.value, message)
        self.sim._attach_alert(alert)
        return alert

    def remove_alert(self, alert_id: str) -> bool:
        """Remove an alert and cancel its timer. Unknown ids are ignored."""
        handle = self._dismiss_timers.pop(alert_id, None)
        if handle is not None:
            handle.cancel()
        removed = self.sim._detach_alert(alert_id)
        if removed:
            logger.debug("Alert %s removed", alert_id)
        return removed

    def dismiss(self, alert_id: str) -> bool:
        """Operator dismissal."""
        return self.remove_alert(alert_id)

    def clear_all(self):
        for handle in self._dismiss_timers.values():
            handle.cancel()
        self._dismiss_timers.clear()
        self.sim._clear_alerts()

    def pending_timers(self) -> int:
        return len(self._dismiss_timers)

    def _expire(self, alert_id: str):
        self._dismiss_timers.pop(alert_id, None)
        if self.sim._detach_alert(alert_id):
            logger.debug("Alert %s auto-dismissed", alert_id)
