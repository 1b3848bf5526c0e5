"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all MedAlert tests.
Fixtures include database sessions, test clients, sample data, and a
recording email transport.
"""

import os
import sys
from datetime import date
from typing import Generator, Dict, Any, List, Optional

# Keep the suite off the on-disk database and the real email provider
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
for _key in ("EMAILJS_SERVICE_ID", "EMAILJS_TEMPLATE_ID", "EMAILJS_PUBLIC_KEY"):
    os.environ.pop(_key, None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, create_db_engine
from models import Profile, Medication, MedicationLog
from api.deps import get_missed_dose_service
from services.missed_dose_service import MissedDoseService
from tools.notification_service import EmailTransport, EmailTransportError, NotificationService
from app import app
from tests import CARETAKER_EMAIL


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine(tmp_path):
    """
    Create a test database engine on a throwaway SQLite file

    A file rather than :memory: so that the job's worker threads each get
    their own connection, as they do in production.
    """
    engine = create_db_engine(f"sqlite:///{tmp_path / 'medalert_test.db'}")

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_local(test_engine) -> sessionmaker:
    """Session factory bound to the test engine"""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )


@pytest.fixture(scope="function")
def db_session(session_local: sessionmaker) -> Generator[Session, None, None]:
    """Create a test database session"""
    session = session_local()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ==================== EMAIL FIXTURES ====================

class RecordingTransport(EmailTransport):
    """In-memory transport that records every send"""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.fail_for: set = set()  # medication names whose send should fail
        self.calls = 0

    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        params: Optional[Dict[str, Any]] = None
    ) -> None:
        self.calls += 1
        medicine = (params or {}).get("medicine_name")
        if medicine in self.fail_for:
            raise EmailTransportError(f"EmailJS API error: 500 rejected {medicine}")
        self.sent.append({
            "to": to,
            "subject": subject,
            "html_body": html_body,
            "params": params or {},
        })


@pytest.fixture
def email_transport() -> RecordingTransport:
    """Email transport that always succeeds unless told otherwise"""
    return RecordingTransport()


@pytest.fixture
def notification_service(email_transport: RecordingTransport) -> NotificationService:
    """Notification service wired to the recording transport"""
    return NotificationService(transport=email_transport)


@pytest.fixture
def missed_dose_service(notification_service: NotificationService, session_local: sessionmaker) -> MissedDoseService:
    """Alerting job wired to the recording transport and the test database"""
    return MissedDoseService(notifications=notification_service, session_factory=session_local)


@pytest.fixture(scope="function")
def client(missed_dose_service: MissedDoseService) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client running the job against the test database"""
    app.dependency_overrides[get_missed_dose_service] = lambda: missed_dose_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def sample_profile_data() -> Dict[str, Any]:
    """Sample profile with alerts enabled"""
    return {
        "full_name": "Priya Sharma",
        "email": "priya@example.com",
        "role": "patient",
        "caretaker_email": CARETAKER_EMAIL,
        "alert_delay": "1 hour",
        "timezone_offset": "+05:30",
    }


@pytest.fixture
def test_profile(db_session: Session, sample_profile_data: Dict) -> Profile:
    """Create and return an alert-enabled profile"""
    profile = Profile(**sample_profile_data)
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def aspirin(db_session: Session, test_profile: Profile) -> Medication:
    """Recurring 09:00 medication for the test profile"""
    medication = Medication(
        user_id=test_profile.id,
        name="Aspirin",
        dosage="81mg",
        reminder_time="09:00"
    )
    db_session.add(medication)
    db_session.commit()
    db_session.refresh(medication)
    return medication


@pytest.fixture
def make_profile(db_session: Session):
    """Factory for additional profiles"""
    def _make(email: str, **overrides) -> Profile:
        data = {
            "full_name": email.split("@")[0].title(),
            "email": email,
            "caretaker_email": f"caretaker+{email}",
            "alert_delay": "30 min",
            "timezone_offset": "+05:30",
        }
        data.update(overrides)
        profile = Profile(**data)
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_medication(db_session: Session):
    """Factory for medications"""
    def _make(profile: Profile, name: str, reminder_time: str, target_date: Optional[date] = None) -> Medication:
        medication = Medication(
            user_id=profile.id,
            name=name,
            reminder_time=reminder_time,
            target_date=target_date
        )
        db_session.add(medication)
        db_session.commit()
        db_session.refresh(medication)
        return medication

    return _make


@pytest.fixture
def make_log(db_session: Session):
    """Factory for medication logs"""
    def _make(medication: Medication, day: date, taken: bool = False, alert_sent: bool = False) -> MedicationLog:
        log = MedicationLog(
            medication_id=medication.id,
            user_id=medication.user_id,
            date=day,
            taken=taken,
            alert_sent=alert_sent
        )
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _make


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
