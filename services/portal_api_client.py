"""Recruiting portal REST API client."""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Union

import httpx

from models.entities import Application, Envelope, Interviewer
from models.errors import NetworkError

logger = logging.getLogger(__name__)


class PortalApiClient:
    """Client for the recruiting portal API."""

    def __init__(
        self,
        base_url: str = None,
        token: str = None,
        timeout: float = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize portal API client.

        Args:
            base_url: API root (defaults to env var PORTAL_API_BASE_URL)
            token: Bearer token (defaults to env var PORTAL_API_TOKEN)
            timeout: Request timeout in seconds (defaults to env var PORTAL_API_TIMEOUT)
            transport: Optional httpx transport, used by tests
        """
        self.base_url = (
            base_url or os.getenv("PORTAL_API_BASE_URL", "http://localhost:5000/api")
        ).rstrip("/")
        self.token = token or os.getenv("PORTAL_API_TOKEN")
        self.timeout = timeout if timeout is not None else float(os.getenv("PORTAL_API_TIMEOUT", "30"))
        self.transport = transport

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests."""
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, payload: Any = None) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            NetworkError: on transport errors, error statuses or invalid JSON
        """
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    method,
                    url,
                    json=payload,
                    headers=self._get_headers()
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            message = self._error_message(e.response) or f"{method} {path} failed"
            logger.error("HTTP %s from portal API %s %s: %s", e.response.status_code, method, path, message)
            raise NetworkError(message, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error("Error calling portal API %s %s: %s", method, path, e)
            raise NetworkError(f"{method} {path} failed: {e}") from e
        except json.JSONDecodeError as e:
            logger.error("JSON decode error in portal API response for %s %s", method, path)
            raise NetworkError(f"Invalid JSON from {method} {path}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> Optional[str]:
        """Pull the API's ``message`` out of an error body, if there is one."""
        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError):
            return None
        if isinstance(body, dict):
            return body.get("message")
        return None

    @staticmethod
    def _records(result: Any, key: str, path: str) -> List[Dict[str, Any]]:
        """
        Pull the list under ``key`` out of a response body.

        Entries that are not objects are logged and dropped.

        Raises:
            NetworkError: if the body does not carry a list under ``key``
        """
        items = result.get(key, []) if isinstance(result, dict) else None
        if not isinstance(items, list):
            logger.error("Unexpected response shape from portal API %s: %r", path, result)
            raise NetworkError(f"Unexpected response from GET {path}")

        records = []
        for item in items:
            if isinstance(item, dict):
                records.append(item)
            else:
                logger.warning("Skipping malformed %s entry from %s: %r", key, path, item)
        return records

    def get_applications(self, job_id: Union[str, int]) -> List[Application]:
        """
        Get all applications for a job posting.

        Args:
            job_id: Job posting ID

        Returns:
            List of applications
        """
        path = f"/applications/{job_id}"
        result = self._request("GET", path)
        return [Application.from_api(item) for item in self._records(result, "applications", path)]

    def get_interviewers(self) -> List[Interviewer]:
        """Get all interviewers."""
        result = self._request("GET", "/auth/interviewers")
        return [Interviewer.from_api(item) for item in self._records(result, "interviewers", "/auth/interviewers")]

    def confirm_schedule(self, schedules: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Confirm interview slots.

        Args:
            schedules: Slots as produced by format_schedule_for_api

        Returns:
            Response dict with success, optional message and confirmed schedules
        """
        return self._request("POST", "/interviews/schedule", {"schedules": schedules})

    def send_emails(self, envelopes: List[Envelope]) -> Any:
        """Send templated emails. Returns the API's response payload."""
        return self._request(
            "POST",
            "/google/send-emails",
            [envelope.to_payload() for envelope in envelopes]
        )
