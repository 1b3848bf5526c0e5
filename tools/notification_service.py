"""
Notification Service Tool
Sends missed-dose alert emails to caretakers
"""

import html
import logging
from typing import Dict, Optional, Any
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import httpx

from config import settings, alert_config
from models import Medication, Profile
from tools.clock import format_reminder_time, utc_now


logger = logging.getLogger(__name__)


class DispatchStatus(str, Enum):
    """Outcome of a single alert dispatch"""
    SENT = "sent"
    SKIPPED_NO_CONFIG = "skipped_no_config"
    FAILED = "failed"


class TransportNotConfiguredError(RuntimeError):
    """Email transport credentials are missing"""


class EmailTransportError(RuntimeError):
    """The email provider rejected or failed the send"""


@dataclass
class NotificationResult:
    """Result of sending a notification"""
    status: DispatchStatus
    recipient: Optional[str] = None
    subject: Optional[str] = None
    delivered_at: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == DispatchStatus.SENT


# Missed dose email, rendered once per dose
MISSED_DOSE_TEMPLATE: Dict[str, str] = {
    "email_subject": "Missed Medication Alert - {medication}",
    "email_body": (
        "<p>Hi,</p>"
        "<p><strong>{patient_name}</strong> (patient #{patient_id}) has not marked "
        "<strong>{medication}</strong> as taken.</p>"
        "<p>It was scheduled for <strong>{scheduled_time}</strong>.</p>"
        "<p>Please check in with them.</p>"
        "<p>- {sender}</p>"
    ),
}


class EmailTransport:
    """Capability interface: deliver one HTML email"""

    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        params: Optional[Dict[str, Any]] = None
    ) -> None:
        raise NotImplementedError


class EmailJSTransport(EmailTransport):
    """
    EmailJS REST transport

    EmailJS renders its own stored template, so the subject, body and the raw
    fields are all passed through as template params.
    """

    def __init__(
        self,
        service_id: Optional[str],
        template_id: Optional[str],
        public_key: Optional[str],
        api_url: str = settings.EMAILJS_API_URL,
        timeout: float = settings.EMAIL_TIMEOUT_SECONDS,
        http_transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.service_id = service_id
        self.template_id = template_id
        self.public_key = public_key
        self.api_url = api_url
        self.timeout = timeout
        self._http_transport = http_transport

    @classmethod
    def from_settings(cls) -> "EmailJSTransport":
        return cls(
            service_id=settings.EMAILJS_SERVICE_ID,
            template_id=settings.EMAILJS_TEMPLATE_ID,
            public_key=settings.EMAILJS_PUBLIC_KEY,
            api_url=settings.EMAILJS_API_URL,
            timeout=settings.EMAIL_TIMEOUT_SECONDS
        )

    @property
    def configured(self) -> bool:
        return bool(self.service_id and self.template_id and self.public_key)

    async def send(
        self,
        to: str,
        subject: str,
        html_body: str,
        params: Optional[Dict[str, Any]] = None
    ) -> None:
        if not self.configured:
            raise TransportNotConfiguredError("Missing EmailJS configuration")

        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "template_params": {
                **(params or {}),
                "caretaker_email": to,
                "subject": subject,
                "message_html": html_body,
            },
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._http_transport) as client:
            response = await client.post(self.api_url, json=payload)

        if response.status_code >= 400:
            raise EmailTransportError(f"EmailJS API error: {response.status_code} {response.text}")


class NotificationService:
    """
    Caretaker notification service for missed doses

    Exactly one email is sent per dose; failures are returned, never raised.
    """

    def __init__(self, transport: Optional[EmailTransport] = None):
        self.transport = transport if transport is not None else EmailJSTransport.from_settings()
        self.template = MISSED_DOSE_TEMPLATE

    def render(self, profile: Profile, medication: Medication) -> Dict[str, str]:
        """Build subject, body and raw template params for one dose"""
        data = {
            "patient_name": profile.full_name or alert_config.DEFAULT_PATIENT_NAME,
            "patient_id": str(profile.id),
            "medication": medication.name,
            "scheduled_time": format_reminder_time(medication.reminder_time),
            "sender": alert_config.SENDER_NAME,
        }
        escaped = {key: html.escape(value) for key, value in data.items()}

        return {
            "subject": self.template["email_subject"].format(**data),
            "html_body": self.template["email_body"].format(**escaped),
            # Field names expected by the stored EmailJS template
            "medicine_name": medication.name,
            "patient_name": data["patient_name"],
            "schedule_time": medication.reminder_time or "",
        }

    async def send_missed_dose_alert(
        self,
        profile: Profile,
        medication: Medication
    ) -> NotificationResult:
        """
        Send one missed-dose email to the profile's caretaker

        Returns:
            NotificationResult with SENT, SKIPPED_NO_CONFIG or FAILED
        """
        recipient = (profile.caretaker_email or "").strip()
        if not recipient:
            logger.warning(f"Profile {profile.id} has no caretaker email, skipping {medication.name}")
            return NotificationResult(
                status=DispatchStatus.SKIPPED_NO_CONFIG,
                error="Caretaker email not set"
            )

        rendered = self.render(profile, medication)
        subject = rendered["subject"]

        try:
            await self.transport.send(
                to=recipient,
                subject=subject,
                html_body=rendered["html_body"],
                params={
                    "medicine_name": rendered["medicine_name"],
                    "patient_name": rendered["patient_name"],
                    "schedule_time": rendered["schedule_time"],
                }
            )
        except TransportNotConfiguredError as e:
            logger.warning(f"Email transport not configured: {e}")
            return NotificationResult(
                status=DispatchStatus.SKIPPED_NO_CONFIG,
                recipient=recipient,
                subject=subject,
                error=str(e)
            )
        except Exception as e:
            logger.error(f"Email to {recipient} for {medication.name} failed: {e}")
            return NotificationResult(
                status=DispatchStatus.FAILED,
                recipient=recipient,
                subject=subject,
                error=str(e)
            )

        logger.info(f"[EMAIL] Missed dose alert for {medication.name} sent to {recipient}")
        return NotificationResult(
            status=DispatchStatus.SENT,
            recipient=recipient,
            subject=subject,
            delivered_at=utc_now()
        )
