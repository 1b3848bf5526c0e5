"""
Alert Engine
Decides which of today's doses are overdue and still need a caretaker alert
"""

import logging
from typing import List, Dict, Any, Optional, Iterable, Union
from dataclasses import dataclass
from datetime import datetime, date, timedelta, timezone
from enum import Enum

from config import alert_config
from models import AlertDelay, Medication, MedicationLog, Profile
from tools.clock import InvalidTimeError, due_instant, parse_offset, today_in_zone


logger = logging.getLogger(__name__)


class DoseState(str, Enum):
    """Lifecycle of a single dose within one run"""
    CANDIDATE = "candidate"
    SENT = "sent"
    LOGGED = "logged"
    SEND_FAILED = "send_failed"


@dataclass(frozen=True)
class CreateLog:
    """No log exists yet for the dose; insert one once alerted"""

    def to_dict(self) -> Dict[str, Any]:
        return {"action": "create"}


@dataclass(frozen=True)
class UpdateLog:
    """An untaken, unalerted log exists; flip its alert_sent flag"""
    log_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {"action": "update", "id": self.log_id}


LogAction = Union[CreateLog, UpdateLog]


@dataclass(frozen=True)
class DueDose:
    """A dose whose alert deadline has passed and that was never alerted on"""
    medication: Medication
    action: LogAction
    date: date
    due_at: datetime
    alert_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "medication_id": self.medication.id,
            "medication": self.medication.name,
            "date": self.date.isoformat(),
            "due_at": self.due_at.isoformat(),
            "alert_at": self.alert_at.isoformat(),
            **self.action.to_dict()
        }


def alert_delay(value: Optional[str]) -> Optional[timedelta]:
    """Map a stored alert_delay policy to a timedelta, None if unknown"""
    if not value:
        return None
    try:
        policy = AlertDelay(value)
    except ValueError:
        return None
    return timedelta(minutes=alert_config.ALERT_DELAY_MINUTES[policy.value])


def applies_on(medication: Medication, day: date) -> bool:
    """Recurring medications apply every day, one-time ones only on target_date"""
    return medication.is_recurring or medication.target_date == day


class AlertEngine:
    """
    Pure decision procedure for missed-dose alerts

    Responsibilities:
    - Filter medications to today's occurrences
    - Compute each dose's alert deadline in the patient's offset
    - Suppress doses already taken or already alerted on
    - Tag each due dose with the log action to perform after dispatch
    """

    def classify(
        self,
        log: Optional[MedicationLog]
    ) -> Optional[LogAction]:
        """Pick the log action for a candidate dose, None if it must not alert"""
        if log is None:
            return CreateLog()
        if not log.taken and not log.alert_sent:
            return UpdateLog(log_id=log.id)
        return None

    def evaluate(
        self,
        profile: Profile,
        medications: Iterable[Medication],
        logs: Iterable[MedicationLog],
        now: datetime,
        tz: Optional[timezone] = None
    ) -> List[DueDose]:
        """
        Find the doses to alert on for one patient

        Args:
            profile: Patient profile with alert settings
            medications: The patient's medications
            logs: The patient's logs for today (single batch)
            now: Current instant (timezone-aware)
            tz: Zone override; defaults to the profile's offset

        Returns:
            Due doses, each tagged with CreateLog or UpdateLog
        """
        delay = alert_delay(profile.alert_delay)
        if delay is None:
            logger.warning(
                f"Profile {profile.id} has unsupported alert delay {profile.alert_delay!r}, skipping"
            )
            return []

        tz = tz or parse_offset(profile.timezone_offset)
        today = today_in_zone(now, tz)
        logs_by_medication = {log.medication_id: log for log in logs if log.date == today}

        due: List[DueDose] = []
        for medication in medications:
            if not applies_on(medication, today):
                continue

            try:
                due_at = due_instant(medication.reminder_time, today, tz)
            except InvalidTimeError as e:
                logger.warning(f"Skipping medication {medication.id} for profile {profile.id}: {e}")
                continue

            alert_at = due_at + delay
            if not now > alert_at:
                continue

            action = self.classify(logs_by_medication.get(medication.id))
            if action is None:
                continue

            due.append(DueDose(
                medication=medication,
                action=action,
                date=today,
                due_at=due_at,
                alert_at=alert_at
            ))

        return due


# Singleton instance
alert_engine = AlertEngine()
