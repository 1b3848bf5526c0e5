"""
Patient Service
Profile lookups for caretaker alerting
"""

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from database import get_db_context
import models


logger = logging.getLogger(__name__)


class PatientService:
    """
    Service for patient profile reads
    """

    def get_alert_profiles(
        self,
        db: Optional[Session] = None
    ) -> List[models.Profile]:
        """
        Get every profile with missed-dose alerts enabled

        A profile qualifies when both a caretaker email and an alert delay
        are set. Loaded in a single query.
        """
        def _get(session: Session) -> List[models.Profile]:
            profiles = session.query(models.Profile).filter(
                models.Profile.caretaker_email.isnot(None),
                models.Profile.alert_delay.isnot(None)
            ).order_by(models.Profile.id).all()

            logger.info(f"Found {len(profiles)} profiles with alerts enabled")
            return profiles

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
patient_service = PatientService()
