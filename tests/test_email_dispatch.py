"""Tests for the email dispatch gateway."""

import pytest

from models.errors import DispatchError, NetworkError, ValidationError
from services.email_dispatch import EmailDispatchGateway


class RecordingClient:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"success": True}
        self.error = error
        self.calls = []

    def send_emails(self, envelopes):
        self.calls.append(envelopes)
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def client():
    return RecordingClient()


@pytest.fixture
def gateway(client):
    return EmailDispatchGateway(client)


def test_interview_scheduled_builds_one_envelope_per_slot(gateway, client):
    result = gateway.send_interview_scheduled([
        {
            "candidateName": "Jane",
            "email": "jane@example.com",
            "jobTitle": "Analyst",
            "interviewDate": "January 6, 2025",
            "interviewTime": "10:00 AM to 10:45 AM",
            "meetingLink": "https://meet.example.com/x",
            "meetingId": "x",
        },
        {"candidateName": "Bob", "email": "bob@example.com", "jobTitle": "Analyst"},
    ])

    assert result.success is True
    assert result.envelopes_sent == 2
    envelopes = client.calls[0]
    assert envelopes[0].to_payload() == {
        "templateName": "INTERVIEW_SCHEDULED",
        "recipients": [{"name": "Jane", "email": "jane@example.com"}],
        "variables": {
            "candidateName": "Jane",
            "position": "Analyst",
            "date": "January 6, 2025",
            "time": "10:00 AM to 10:45 AM",
            "meetingLink": "https://meet.example.com/x",
            "meetingId": "x",
        },
    }
    assert envelopes[1].variables["meetingLink"] == ""


@pytest.mark.parametrize("bad", [[], None, "nope"])
def test_interview_scheduled_rejects_empty_input(gateway, client, bad):
    with pytest.raises(ValidationError, match="No valid email data provided"):
        gateway.send_interview_scheduled(bad)
    assert client.calls == []


def test_thank_you(gateway, client):
    gateway.send_thank_you({"candidateName": "Jane", "email": "jane@example.com", "jobTitle": "Analyst"})

    envelope = client.calls[0][0]
    assert envelope.template_name == "THANK_YOU"
    assert envelope.variables == {"position": "Analyst"}


def test_final_status(gateway, client):
    gateway.send_final_status({"candidateName": "Jane", "email": "j@example.com", "jobTitle": "Analyst", "status": "onhold"})
    assert client.calls[0][0].variables == {"position": "Analyst", "status": "onhold"}


@pytest.mark.parametrize("method,template", [
    ("send_acceptance", "INTERVIEW_ACCEPTED"),
    ("send_rejection", "INTERVIEW_REJECTED"),
])
def test_acceptance_and_rejection_use_candidate_email(gateway, client, method, template):
    getattr(gateway, method)({"candidateName": "Jane", "candidateEmail": "jane@example.com", "jobTitle": "Analyst"})

    envelope = client.calls[0][0]
    assert envelope.template_name == template
    assert envelope.recipients[0].email == "jane@example.com"
    assert envelope.variables == {"position": "Analyst", "candidateName": "Jane"}


def test_failure_wrapped_in_dispatch_error():
    cause = NetworkError("boom", status_code=500)
    gateway = EmailDispatchGateway(RecordingClient(error=cause))

    with pytest.raises(DispatchError) as excinfo:
        gateway.send_thank_you({"candidateName": "Jane", "email": "j@example.com"})

    assert excinfo.value.cause is cause
    assert excinfo.value.__cause__ is cause


def test_unsuccessful_payload_reported():
    gateway = EmailDispatchGateway(RecordingClient(response={"success": False}))
    result = gateway.send_thank_you({"candidateName": "Jane", "email": "j@example.com"})
    assert result.success is False


def test_mock_renders_sent_emails(portal):
    gateway = EmailDispatchGateway(portal)
    gateway.send_rejection({"candidateName": "Jane", "candidateEmail": "jane@example.com", "jobTitle": "Analyst"})

    sent = portal.get_sent_emails()
    assert len(sent) == 1
    assert sent[0]["to"] == "jane@example.com"
    assert sent[0]["subject"] == "Update Regarding Your Application"
    assert "Analyst position" in sent[0]["body"]
