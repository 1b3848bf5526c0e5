"""
MedAlert Test Suite
===================

This package contains all tests for the missed-medication alerting service.

Test Structure:
- test_tools/: clock and email dispatch tests
- test_actions/: due-dose evaluation tests
- test_services/: log reconciliation and batch job tests
- test_api/: HTTP trigger tests
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_services/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "integration"
"""

from datetime import datetime, timedelta, timezone

# Test configuration
CARETAKER_EMAIL = "c@x.com"

# Zone used by every fixture profile
IST = timezone(timedelta(hours=5, minutes=30))


def ist(year: int, month: int, day: int, hour: int, minute: int, second: int = 0) -> datetime:
    """Aware instant on the IST wall-clock"""
    return datetime(year, month, day, hour, minute, second, tzinfo=IST)


__all__ = [
    "CARETAKER_EMAIL",
    "IST",
    "ist",
]
