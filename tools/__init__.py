"""
Tools Package
Clock and email utilities for the MedAlert system
"""

from .clock import (
    InvalidTimeError,
    utc_now,
    parse_offset,
    today_in_zone,
    parse_reminder_time,
    due_instant,
    format_reminder_time
)

from .notification_service import (
    NotificationService,
    NotificationResult,
    DispatchStatus,
    EmailTransport,
    EmailJSTransport,
    EmailTransportError,
    TransportNotConfiguredError,
    MISSED_DOSE_TEMPLATE
)

__all__ = [
    # Clock
    "InvalidTimeError",
    "utc_now",
    "parse_offset",
    "today_in_zone",
    "parse_reminder_time",
    "due_instant",
    "format_reminder_time",

    # Notification Service
    "NotificationService",
    "NotificationResult",
    "DispatchStatus",
    "EmailTransport",
    "EmailJSTransport",
    "EmailTransportError",
    "TransportNotConfiguredError",
    "MISSED_DOSE_TEMPLATE"
]
