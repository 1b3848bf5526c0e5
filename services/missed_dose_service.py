"""
Missed Dose Service
Runs the missed-medication alerting job across all eligible patients
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, field
from datetime import date, datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from database import get_db_context
import models
from actions.alert_engine import AlertEngine, DoseState, DueDose, alert_engine
from services.log_service import MedicationLogService, medication_log_service
from services.medication_service import MedicationService, medication_service
from services.patient_service import PatientService, patient_service
from tools.clock import InvalidTimeError, parse_offset, today_in_zone, utc_now
from tools.notification_service import DispatchStatus, NotificationService


logger = logging.getLogger(__name__)


class AlertJobError(RuntimeError):
    """The job could not determine its work list"""


@dataclass
class DoseOutcome:
    """What happened to one due dose during a run"""
    patient_id: int
    medication_id: int
    medication: str
    action: str
    status: DispatchStatus
    state: DoseState
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patient": self.patient_id,
            "medication": self.medication,
            "medication_id": self.medication_id,
            "action": self.action,
            "status": self.status.value,
            "logged": self.state == DoseState.LOGGED,
        }


@dataclass
class AlertRunReport:
    """Aggregate result of one invocation"""
    started_at: datetime
    processed: List[DoseOutcome] = field(default_factory=list)
    time_ms: float = 0.0

    @property
    def sent_count(self) -> int:
        return sum(1 for o in self.processed if o.status == DispatchStatus.SENT)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "processed": [o.to_dict() for o in self.processed],
            "time_ms": self.time_ms,
        }


class MissedDoseService:
    """
    Batch orchestrator for caretaker missed-dose alerts

    Each patient pipeline loads medications and today's logs, asks the alert
    engine for due doses, dispatches one email per dose and records the alert
    only after a successful send. Pipelines and dispatches run concurrently;
    a failure is contained to its own dose or patient.

    Database work is synchronous SQLAlchemy, so every unit of it runs in a
    worker thread with its own short-lived session. No session is shared
    between concurrent tasks.
    """

    def __init__(
        self,
        notifications: Optional[NotificationService] = None,
        engine: AlertEngine = alert_engine,
        patients: PatientService = patient_service,
        medications: MedicationService = medication_service,
        logs: MedicationLogService = medication_log_service,
        session_factory: Optional[sessionmaker] = None
    ):
        self.notifications = notifications or NotificationService()
        self.engine = engine
        self.patients = patients
        self.medications = medications
        self.logs = logs
        self.session_factory = session_factory

    # ==================== DATABASE UNITS (worker threads) ====================

    def _load_profiles(self) -> List[models.Profile]:
        with get_db_context(self.session_factory) as session:
            profiles = self.patients.get_alert_profiles(db=session)
            # Detach loaded rows so they stay readable after the session closes
            session.expunge_all()
            return profiles

    def _load_day(
        self,
        user_id: int,
        day: date
    ) -> Tuple[List[models.Medication], List[models.MedicationLog]]:
        with get_db_context(self.session_factory) as session:
            medications = self.medications.get_medications_for_day(user_id, day, db=session)
            logs = self.logs.get_logs_for_day(user_id, day, db=session)
            session.expunge_all()
            return medications, logs

    def _record(self, user_id: int, due_dose: DueDose) -> None:
        with get_db_context(self.session_factory) as session:
            self.logs.reconcile(user_id, due_dose, db=session)

    # ==================== PIPELINE ====================

    async def run(self, now: Optional[datetime] = None) -> AlertRunReport:
        """
        Run one alerting pass

        Args:
            now: Instant to evaluate against (timezone-aware), defaults to now

        Returns:
            AlertRunReport with one entry per attempted dose

        Raises:
            AlertJobError: if the eligible profiles cannot be loaded
        """
        start = time.perf_counter()
        report = AlertRunReport(started_at=now or utc_now())
        logger.info(f"Missed dose check started at {report.started_at.isoformat()}")

        try:
            profiles = await asyncio.to_thread(self._load_profiles)
        except Exception as e:
            logger.error(f"Could not load alert profiles: {e}")
            raise AlertJobError(f"Could not load alert profiles: {e}") from e

        results = await asyncio.gather(
            *(self.process_profile(profile, report.started_at) for profile in profiles),
            return_exceptions=True
        )

        for profile, result in zip(profiles, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                logger.error(f"Error processing profile {profile.id}: {result}")
                continue
            report.processed.extend(result)

        report.time_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Missed dose check for {report.started_at.isoformat()} finished: "
            f"{len(report.processed)} doses, {report.sent_count} sent, {report.time_ms:.1f} ms"
        )
        return report

    async def process_profile(
        self,
        profile: models.Profile,
        now: datetime
    ) -> List[DoseOutcome]:
        """Evaluate and alert on one patient's due doses"""
        profile_id = profile.id

        try:
            tz = parse_offset(profile.timezone_offset)
        except InvalidTimeError as e:
            logger.error(f"Profile {profile_id} has an invalid timezone offset: {e}")
            return []

        today = today_in_zone(now, tz)

        try:
            medications, logs = await asyncio.to_thread(self._load_day, profile_id, today)
        except SQLAlchemyError as e:
            logger.error(f"Error loading data for profile {profile_id}: {e}")
            return []

        due = self.engine.evaluate(profile, medications, logs, now, tz=tz)
        if not due:
            return []

        logger.info(f"Profile {profile_id}: {len(due)} dose(s) due for alert on {today}")

        return list(await asyncio.gather(
            *(self.process_dose(profile, dose) for dose in due)
        ))

    async def process_dose(
        self,
        profile: models.Profile,
        due_dose: DueDose
    ) -> DoseOutcome:
        """Send the alert for one dose, then record it if the send succeeded"""
        outcome = DoseOutcome(
            patient_id=profile.id,
            medication_id=due_dose.medication.id,
            medication=due_dose.medication.name,
            action=due_dose.action.to_dict()["action"],
            status=DispatchStatus.FAILED,
            state=DoseState.CANDIDATE
        )

        try:
            result = await self.notifications.send_missed_dose_alert(profile, due_dose.medication)
        except Exception as e:
            logger.error(f"Dispatch crashed for medication {outcome.medication_id}: {e}")
            outcome.state = DoseState.SEND_FAILED
            outcome.error = str(e)
            return outcome

        outcome.status = result.status
        if not result.success:
            outcome.state = DoseState.SEND_FAILED
            outcome.error = result.error
            return outcome

        outcome.state = DoseState.SENT
        try:
            await asyncio.to_thread(self._record, outcome.patient_id, due_dose)
        except Exception as e:
            logger.error(
                f"Alert for medication {outcome.medication_id} was sent but not recorded: {e}"
            )
            outcome.error = str(e)
            return outcome

        outcome.state = DoseState.LOGGED
        return outcome


async def check_missed_medications(
    now: Optional[datetime] = None,
    session_factory: Optional[sessionmaker] = None
) -> AlertRunReport:
    """Convenience function to run one alerting pass with default wiring"""
    return await MissedDoseService(session_factory=session_factory).run(now=now)
