"""
Test Tools Package
Tests for the tools module (clock, notification service)
"""

__all__ = [
    "test_clock",
    "test_notification_service",
]
