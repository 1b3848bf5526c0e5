"""
Medication Service
Medication lookups for the alerting job
"""

import logging
from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import or_

from database import get_db_context
import models


logger = logging.getLogger(__name__)


class MedicationService:
    """
    Service for medication-related reads
    """

    def get_medications_for_day(
        self,
        user_id: int,
        day: date,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """
        Get a patient's medications that occur on a given day

        Recurring medications (no target_date) occur every day; one-time
        medications only on their target_date.

        Args:
            user_id: Owner profile ID
            day: Calendar day in the patient's zone
            db: Database session

        Returns:
            List of Medication objects ordered by reminder time
        """
        def _get(session: Session) -> List[models.Medication]:
            return session.query(models.Medication).filter(
                models.Medication.user_id == user_id,
                or_(
                    models.Medication.target_date.is_(None),
                    models.Medication.target_date == day
                )
            ).order_by(models.Medication.reminder_time).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
medication_service = MedicationService()
