"""
Database Models
SQLAlchemy ORM models for MedAlert
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Date, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from enum import Enum as PyEnum

from database import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ==================== ENUMS ====================

class AlertDelay(str, PyEnum):
    """How long after the reminder time an untaken dose is reported"""
    TEN_MINUTES = "10 min"
    THIRTY_MINUTES = "30 min"
    ONE_HOUR = "1 hour"
    TWO_HOURS = "2 hours"


class UserRole(str, PyEnum):
    """Role chosen at signup"""
    PATIENT = "patient"
    CARETAKER = "caretaker"


# ==================== MODELS ====================

class Profile(Base):
    """Patient profile with caretaker alert preferences"""
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255))
    email = Column(String(255), unique=True, index=True)
    role = Column(String(20), default=UserRole.PATIENT.value)

    # Alert settings, edited from the caretaker dashboard
    caretaker_email = Column(String(255))
    alert_delay = Column(String(20))  # one of AlertDelay values
    timezone_offset = Column(String(6), default="+05:30")  # "+05:30", "-04:00"

    created_at = Column(DateTime(timezone=True), default=_utc_now)
    updated_at = Column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)

    # Relationships
    medications = relationship("Medication", back_populates="profile", cascade="all, delete-orphan")
    medication_logs = relationship("MedicationLog", back_populates="profile", cascade="all, delete-orphan")


class Medication(Base):
    """A medication with a daily reminder time"""
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)

    name = Column(String(255), nullable=False)
    dosage = Column(String(100))  # e.g., "1 Tablet"
    instructions = Column(Text)

    # Local wall-clock time "HH:MM", interpreted in the owner's offset
    reminder_time = Column(String(5), nullable=False)
    # Set for one-time doses; NULL means the reminder recurs every day
    target_date = Column(Date)

    created_at = Column(DateTime(timezone=True), default=_utc_now)

    # Relationships
    profile = relationship("Profile", back_populates="medications")
    logs = relationship("MedicationLog", back_populates="medication", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_medications_user_target", "user_id", "target_date"),
    )

    @property
    def is_recurring(self) -> bool:
        return self.target_date is None


class MedicationLog(Base):
    """Per-day record of whether a dose was taken and whether the caretaker was alerted"""
    __tablename__ = "medication_logs"

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    date = Column(Date, nullable=False)

    taken = Column(Boolean, nullable=False, default=False)
    alert_sent = Column(Boolean, nullable=False, default=False)

    marked_at = Column(DateTime(timezone=True), default=_utc_now)

    # Relationships
    medication = relationship("Medication", back_populates="logs")
    profile = relationship("Profile", back_populates="medication_logs")

    __table_args__ = (
        UniqueConstraint("medication_id", "date", name="uq_medication_log_day"),
        Index("ix_medication_logs_user_date", "user_id", "date"),
    )
