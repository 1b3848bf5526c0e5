"""
Medication Log Service
Reads today's logs and records caretaker alerts against them
"""

import logging
from typing import List, Optional
from datetime import date
from sqlalchemy.orm import Session

from database import get_db_context
import models
from actions.alert_engine import CreateLog, UpdateLog, DueDose
from tools.clock import utc_now


logger = logging.getLogger(__name__)


class LogReconcileError(RuntimeError):
    """The alert was sent but could not be recorded"""


class MedicationLogService:
    """
    Service for medication_logs reads and the alert_sent write

    The write here is the only mutation made by the alerting job. It must be
    called after the email for the dose was delivered.
    """

    def get_logs_for_day(
        self,
        user_id: int,
        day: date,
        db: Optional[Session] = None
    ) -> List[models.MedicationLog]:
        """All of a patient's logs for one date, in a single query"""
        def _get(session: Session) -> List[models.MedicationLog]:
            return session.query(models.MedicationLog).filter(
                models.MedicationLog.user_id == user_id,
                models.MedicationLog.date == day
            ).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    def reconcile(
        self,
        user_id: int,
        due_dose: DueDose,
        db: Optional[Session] = None
    ) -> models.MedicationLog:
        """
        Mark a dispatched dose as alerted

        Args:
            user_id: Owner of the medication
            due_dose: The dose that was successfully alerted on
            db: Database session

        Returns:
            The created or updated MedicationLog
        """
        def _reconcile(session: Session) -> models.MedicationLog:
            action = due_dose.action

            if isinstance(action, CreateLog):
                log = models.MedicationLog(
                    medication_id=due_dose.medication.id,
                    user_id=user_id,
                    date=due_dose.date,
                    taken=False,
                    alert_sent=True,
                    marked_at=utc_now()
                )
                session.add(log)
            elif isinstance(action, UpdateLog):
                log = session.get(models.MedicationLog, action.log_id)
                if log is None:
                    raise LogReconcileError(f"Medication log {action.log_id} no longer exists")
                log.alert_sent = True
            else:
                raise LogReconcileError(f"Unknown log action: {action!r}")

            try:
                session.commit()
            except Exception:
                session.rollback()
                raise
            session.refresh(log)

            logger.info(
                f"Recorded alert for medication {due_dose.medication.id} on {due_dose.date} "
                f"({action.to_dict()['action']})"
            )
            return log

        if db:
            return _reconcile(db)

        with get_db_context() as session:
            return _reconcile(session)


# Singleton instance
medication_log_service = MedicationLogService()
