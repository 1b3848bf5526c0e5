"""
Actions Module
Decision engines for caretaker alerts
"""

from .alert_engine import (
    AlertEngine,
    CreateLog,
    UpdateLog,
    LogAction,
    DueDose,
    DoseState,
    alert_delay,
    applies_on,
    alert_engine
)


__all__ = [
    # Alert Engine
    "AlertEngine",
    "CreateLog",
    "UpdateLog",
    "LogAction",
    "DueDose",
    "DoseState",
    "alert_delay",
    "applies_on",
    "alert_engine"
]
