from enum import Enum


class Mode(Enum):
    """Operation mode of the dashboard."""
    MANUAL = "manual"
    AUTO = "auto"


class AlertType(Enum):
    """Alert severity shown in the alert list."""
    WARNING = "warning"
    CRITICAL = "critical"


class AlertLevel(Enum):
    """Severity of an audible alert condition."""
    NONE = 0
    WARNING = 1
    CRITICAL = 2


class Zone(Enum):
    """Color zone of a gauge."""
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"
