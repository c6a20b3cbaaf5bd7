"""Tests for the portal API client."""

import json

import httpx
import pytest

from models.entities import ApplicationStatus, Envelope, Recipient
from models.errors import NetworkError
from services.portal_api_client import PortalApiClient


def make_client(handler, **kwargs):
    return PortalApiClient(
        base_url="https://portal.test/api/",
        token="secret",
        transport=httpx.MockTransport(handler),
        **kwargs
    )


def test_get_applications():
    def handler(request):
        assert request.method == "GET"
        assert request.url.path == "/api/applications/42"
        assert request.headers["Authorization"] == "Bearer secret"
        return httpx.Response(200, json={"applications": [{
            "applicationId": 5,
            "candidateName": "Jane",
            "email": "jane@example.com",
            "applicationDate": "2025-01-06T09:00:00.000Z",
            "applicationStatus": "scheduled",
            "resumeScore": "88.5",
            "resume": {"url": "https://files.test/r.pdf"},
        }]})

    applications = make_client(handler).get_applications(42)

    assert len(applications) == 1
    application = applications[0]
    assert application.application_id == "5"
    assert application.status == ApplicationStatus.SCHEDULED
    assert application.resume_score == 88.5
    assert application.application_date.year == 2025


def test_get_interviewers():
    def handler(request):
        assert request.url.path == "/api/auth/interviewers"
        return httpx.Response(200, json={"interviewers": [{"id": 1, "name": "Ann"}]})

    interviewers = make_client(handler).get_interviewers()
    assert interviewers[0].id == "1"
    assert interviewers[0].name == "Ann"


def test_non_object_entries_dropped():
    def handler(request):
        return httpx.Response(200, json={"interviewers": [None, {"id": 2, "name": "Bo"}, "x"]})

    interviewers = make_client(handler).get_interviewers()
    assert [i.id for i in interviewers] == ["2"]


@pytest.mark.parametrize("body", [b"null", b"[]", b"{\"applications\": {\"applicationId\": \"a1\"}}"])
def test_unexpected_body_raises_network_error(body):
    client = make_client(lambda request: httpx.Response(200, content=body))
    with pytest.raises(NetworkError, match="Unexpected response"):
        client.get_applications(1)


def test_confirm_schedule_posts_body():
    def handler(request):
        assert request.method == "POST"
        assert json.loads(request.content) == {"schedules": [{"applicationId": "a1"}]}
        return httpx.Response(200, json={"success": True, "schedules": []})

    assert make_client(handler).confirm_schedule([{"applicationId": "a1"}])["success"] is True


def test_send_emails_posts_envelopes():
    def handler(request):
        assert request.url.path == "/api/google/send-emails"
        assert json.loads(request.content) == [{
            "templateName": "THANK_YOU",
            "recipients": [{"name": "Jane", "email": "jane@example.com"}],
            "variables": {"position": "Analyst"},
        }]
        return httpx.Response(200, json={"success": True})

    envelope = Envelope("THANK_YOU", [Recipient("Jane", "jane@example.com")], {"position": "Analyst"})
    assert make_client(handler).send_emails([envelope]) == {"success": True}


def test_error_status_raises_network_error_with_message():
    def handler(request):
        return httpx.Response(403, json={"message": "Forbidden for this job"})

    with pytest.raises(NetworkError) as excinfo:
        make_client(handler).get_applications(1)

    assert excinfo.value.status_code == 403
    assert str(excinfo.value) == "Forbidden for this job"


def test_transport_error_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError):
        make_client(handler).get_interviewers()


def test_invalid_json_raises_network_error():
    def handler(request):
        return httpx.Response(200, content=b"<html>")

    with pytest.raises(NetworkError):
        make_client(handler).get_interviewers()


def test_configuration_from_environment(monkeypatch):
    monkeypatch.setenv("PORTAL_API_BASE_URL", "https://env.test/api")
    monkeypatch.setenv("PORTAL_API_TIMEOUT", "5")
    monkeypatch.delenv("PORTAL_API_TOKEN", raising=False)

    client = PortalApiClient()

    assert client.base_url == "https://env.test/api"
    assert client.timeout == 5.0
    assert "Authorization" not in client._get_headers()
