"""Email dispatch gateway for candidate notifications."""

import logging
from typing import Any, Optional

from models.entities import DispatchResult, Envelope, Recipient
from models.errors import DispatchError, NetworkError, ValidationError

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class EmailDispatchGateway:
    """Maps notification kinds to templated envelopes and sends them."""

    def __init__(self, api_client):
        """
        Initialize gateway.

        Args:
            api_client: Anything with a ``send_emails(envelopes)`` method
                (PortalApiClient or PortalApiMock)
        """
        self.api_client = api_client

    @staticmethod
    def _envelope(
        template_name: str,
        name: Optional[str],
        email: Optional[str],
        variables: dict[str, Any]
    ) -> Envelope:
        return Envelope(
            template_name=template_name,
            recipients=[Recipient(name=_text(name), email=_text(email))],
            variables={key: _text(value) for key, value in variables.items()},
        )

    def send_thank_you(self, email_data: dict[str, Any]) -> DispatchResult:
        """Acknowledge a received application."""
        envelope = self._envelope(
            "THANK_YOU",
            email_data.get("candidateName"),
            email_data.get("email"),
            {"position": email_data.get("jobTitle")},
        )
        return self.send_email([envelope])

    def send_interview_scheduled(self, email_data_list: list[dict[str, Any]]) -> DispatchResult:
        """
        Notify candidates of their confirmed interview slots.

        Args:
            email_data_list: One dict per confirmed slot, as produced by
                format_email_data

        Raises:
            ValidationError: if the list is empty
            DispatchError: if sending fails
        """
        if not isinstance(email_data_list, list) or not email_data_list:
            logger.error("Invalid email data list: %r", email_data_list)
            raise ValidationError("No valid email data provided")

        envelopes = [
            self._envelope(
                "INTERVIEW_SCHEDULED",
                email_data.get("candidateName"),
                email_data.get("email"),
                {
                    "candidateName": email_data.get("candidateName"),
                    "position": email_data.get("jobTitle"),
                    "date": email_data.get("interviewDate"),
                    "time": email_data.get("interviewTime"),
                    "meetingLink": email_data.get("meetingLink"),
                    "meetingId": email_data.get("meetingId"),
                },
            )
            for email_data in email_data_list
        ]
        logger.info("Sending %d interview scheduled email(s)", len(envelopes))
        return self.send_email(envelopes)

    def send_final_status(self, email_data: dict[str, Any]) -> DispatchResult:
        """Send the final application status (selected, rejected or onhold)."""
        envelope = self._envelope(
            "FINAL_STATUS",
            email_data.get("candidateName"),
            email_data.get("email"),
            {
                "position": email_data.get("jobTitle"),
                "status": email_data.get("status"),
            },
        )
        return self.send_email([envelope])

    def send_acceptance(self, candidate_data: dict[str, Any]) -> DispatchResult:
        """Tell a candidate they were accepted after the interview."""
        envelope = self._envelope(
            "INTERVIEW_ACCEPTED",
            candidate_data.get("candidateName"),
            candidate_data.get("candidateEmail"),
            {
                "position": candidate_data.get("jobTitle"),
                "candidateName": candidate_data.get("candidateName"),
            },
        )
        return self.send_email([envelope])

    def send_rejection(self, candidate_data: dict[str, Any]) -> DispatchResult:
        """Tell a candidate they were not selected after the interview."""
        envelope = self._envelope(
            "INTERVIEW_REJECTED",
            candidate_data.get("candidateName"),
            candidate_data.get("candidateEmail"),
            {
                "position": candidate_data.get("jobTitle"),
                "candidateName": candidate_data.get("candidateName"),
            },
        )
        return self.send_email([envelope])

    def send_email(self, envelopes: list[Envelope]) -> DispatchResult:
        """
        Send envelopes in a single call. The whole batch succeeds or fails.

        Raises:
            DispatchError: wrapping the underlying NetworkError
        """
        try:
            payload = self.api_client.send_emails(envelopes)
        except NetworkError as e:
            logger.error("Error sending email: %s", e)
            raise DispatchError(f"Failed to send emails: {e}", cause=e) from e

        success = True
        if isinstance(payload, dict) and "success" in payload:
            success = bool(payload["success"])
        return DispatchResult(success=success, envelopes_sent=len(envelopes), payload=payload)
