"""Mock portal API with synthetic data."""

import hashlib
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

import pytz

from models.entities import Application, ApplicationStatus, Envelope, Interviewer
from models.errors import NetworkError
from services.template_renderer import render_envelope

logger = logging.getLogger(__name__)


class PortalApiMock:
    """Mock client for the portal API that keeps everything in memory."""

    def __init__(self, job_title: str = "Senior Software Engineer"):
        """Initialize with synthetic data."""
        self.job_title = job_title
        self._applications = self._generate_applications()
        self._interviewers = self._generate_interviewers()
        self._failures: dict[str, str] = {}
        self.confirmed: list[dict[str, Any]] = []
        self.sent_emails: list[dict[str, Any]] = []

    def _generate_applications(self) -> list[Application]:
        """Generate synthetic applications."""
        base = datetime(2025, 1, 6, 9, 30, tzinfo=pytz.UTC)
        rows = [
            ("app_001", "Rajesh Kumar", 88, ApplicationStatus.PENDING),
            ("app_002", "Priya Sharma", 92, ApplicationStatus.PENDING),
            ("app_003", "Michael Chen", 65, ApplicationStatus.REJECTED),
            ("app_004", "Sarah Johnson", 74, ApplicationStatus.PENDING),
            ("app_005", "Amit Patel", 81, ApplicationStatus.SCHEDULED),
            ("app_006", "Emma Wilson", 57, ApplicationStatus.PENDING),
            ("app_007", "Carlos Rivera", 70, ApplicationStatus.ACCEPTED),
        ]
        return [
            Application(
                application_id=app_id,
                candidate_name=name,
                email=f"{name.lower().replace(' ', '.')}@example.com",
                application_date=base + timedelta(days=offset),
                status=status,
                resume_score=float(score),
                resume=f"resumes/{app_id}.pdf"
            )
            for offset, (app_id, name, score, status) in enumerate(rows)
        ]

    def _generate_interviewers(self) -> list[Interviewer]:
        """Generate synthetic interviewers."""
        return [
            Interviewer(id="int_001", name="Vikram Singh", email="vikram.singh@example.com"),
            Interviewer(id="int_002", name="David Thompson", email="david.thompson@example.com"),
            Interviewer(id="int_003", name="Lisa Anderson", email="lisa.anderson@example.com"),
        ]

    def fail_next(self, operation: str, message: str = "Service unavailable"):
        """Make the next call to ``operation`` raise NetworkError."""
        self._failures[operation] = message

    def _maybe_fail(self, operation: str):
        message = self._failures.pop(operation, None)
        if message is not None:
            raise NetworkError(message, status_code=503)

    def get_application_by_id(self, application_id: str) -> Optional[Application]:
        """Get an application by ID."""
        for application in self._applications:
            if application.application_id == application_id:
                return application
        return None

    def get_applications(self, job_id: Union[str, int]) -> List[Application]:
        """List all applications. Every job sees the same synthetic set."""
        self._maybe_fail("get_applications")
        return self._applications.copy()

    def get_interviewers(self) -> List[Interviewer]:
        """List all interviewers."""
        self._maybe_fail("get_interviewers")
        return self._interviewers.copy()

    def confirm_schedule(self, schedules: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Confirm slots, attaching a meeting id and join URL to each."""
        self._maybe_fail("confirm_schedule")
        if not schedules:
            return {"success": False, "message": "No schedules provided", "schedules": []}

        confirmed = []
        for schedule in schedules:
            application = self.get_application_by_id(str(schedule.get("applicationId")))
            digest = hashlib.sha1(
                f"{schedule.get('applicationId')}|{schedule.get('startDateTime')}".encode("utf-8")
            ).hexdigest()[:10]
            meeting_id = schedule.get("meetingId") or f"mtg-{digest}"
            confirmed.append({
                **schedule,
                "candidateName": application.candidate_name if application else None,
                "candidateEmail": application.email if application else None,
                "jobTitle": self.job_title,
                "meetingId": meeting_id,
                "joinUrl": schedule.get("joinUrl") or f"https://meet.example.com/{meeting_id}",
            })

        self.confirmed.extend(confirmed)
        return {"success": True, "schedules": confirmed}

    def send_emails(self, envelopes: List[Envelope]) -> Dict[str, Any]:
        """Render and record emails instead of sending them."""
        self._maybe_fail("send_emails")
        sent_at = datetime.now(pytz.UTC)
        for envelope in envelopes:
            for email in render_envelope(envelope):
                self.sent_emails.append({
                    "to": email.to_email,
                    "name": email.to_name,
                    "subject": email.subject,
                    "body": email.body,
                    "template": envelope.template_name,
                    "sent_at": sent_at,
                })
        logger.info("Mock recorded %d envelope(s)", len(envelopes))
        return {"success": True, "sent": len(envelopes)}

    def get_sent_emails(self) -> list[dict]:
        """Get all sent emails."""
        return self.sent_emails.copy()

    def clear_emails(self):
        """Clear email log (for testing/reset)."""
        self.sent_emails = []
