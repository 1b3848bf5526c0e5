#!/usr/bin/env python
"""
Seed Data
Script to seed the database with a demo patient for development
"""

import sys
import os
import argparse
import logging
from datetime import date, timedelta

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SessionLocal, engine, Base
from models import Profile, Medication, MedicationLog, AlertDelay


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEMO_EMAIL = "demo@medalert.app"


def create_tables():
    """Create all database tables"""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


def seed_demo_profile(db, caretaker_email: str, alert_delay: str) -> Profile:
    """Create a demo patient with alerts enabled"""
    existing = db.query(Profile).filter(Profile.email == DEMO_EMAIL).first()
    if existing:
        logger.info("Demo profile already exists")
        return existing

    profile = Profile(
        full_name="Demo Patient",
        email=DEMO_EMAIL,
        role="patient",
        caretaker_email=caretaker_email,
        alert_delay=alert_delay,
        timezone_offset="+05:30"
    )
    db.add(profile)
    db.flush()

    logger.info(f"Created profile: {profile.full_name} (ID: {profile.id})")
    return profile


def seed_medications(db, user_id: int) -> list:
    """Add a mix of recurring and one-time medications"""
    medications_data = [
        {"name": "Metformin", "dosage": "500mg", "reminder_time": "08:00"},
        {"name": "Aspirin", "dosage": "81mg", "reminder_time": "09:00"},
        {"name": "Atorvastatin", "dosage": "20mg", "reminder_time": "21:00"},
        # One-time dose, only alerted on its target date
        {"name": "Vitamin D", "dosage": "50000 IU", "reminder_time": "12:00", "target_date": date.today()},
    ]

    medications = []
    for med_data in medications_data:
        medication = Medication(user_id=user_id, **med_data)
        db.add(medication)
        medications.append(medication)

    db.flush()
    logger.info(f"Added {len(medications)} medications")
    return medications


def seed_history(db, user_id: int, medications: list, days: int = 7):
    """Mark past recurring doses as taken so only today's can alert"""
    count = 0
    for offset in range(1, days + 1):
        day = date.today() - timedelta(days=offset)
        for medication in medications:
            if medication.target_date is not None:
                continue
            db.add(MedicationLog(
                medication_id=medication.id,
                user_id=user_id,
                date=day,
                taken=True
            ))
            count += 1

    logger.info(f"Added {count} historical logs")


def clear_data(db):
    """Clear all data from database"""
    logger.warning("Clearing all data...")
    db.query(MedicationLog).delete()
    db.query(Medication).delete()
    db.query(Profile).delete()
    db.commit()
    logger.info("All data cleared")


def seed_all(caretaker_email: str, alert_delay: str, clear_existing: bool = False):
    """Seed all data"""
    create_tables()

    db = SessionLocal()
    try:
        if clear_existing:
            clear_data(db)

        profile = seed_demo_profile(db, caretaker_email, alert_delay)
        db.commit()

        medications = seed_medications(db, profile.id)
        db.commit()

        seed_history(db, profile.id, medications)
        db.commit()

        print(f"\nDemo Profile ID: {profile.id}")
        print(f"Caretaker Email: {profile.caretaker_email}")
        print(f"Alert Delay: {profile.alert_delay}")
        print(f"Medications: {db.query(Medication).filter(Medication.user_id == profile.id).count()}")

    except Exception as e:
        db.rollback()
        logger.error(f"Error during seeding: {e}")
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(
        description="Seed the database with a demo patient"
    )
    parser.add_argument(
        "--caretaker-email",
        default="caretaker@example.com",
        help="Address that receives missed dose alerts"
    )
    parser.add_argument(
        "--alert-delay",
        choices=[d.value for d in AlertDelay],
        default=AlertDelay.THIRTY_MINUTES.value,
        help="Delay after the reminder time before alerting"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear existing data before seeding"
    )

    args = parser.parse_args()

    seed_all(args.caretaker_email, args.alert_delay, clear_existing=args.clear)


if __name__ == "__main__":
    main()
