"""Shared fixtures."""

from datetime import date, datetime

import pytest
import pytz

from models.entities import Application, ApplicationStatus, ScheduleParameters
from services.portal_api_mock import PortalApiMock


@pytest.fixture
def params():
    """One working Monday, 10:00-17:00, 45 minute slots, lunch 13:00-14:00."""
    return ScheduleParameters(start_date=date(2025, 1, 6), end_date=date(2025, 1, 6))


@pytest.fixture
def portal():
    return PortalApiMock()


@pytest.fixture
def make_application():
    def _make(app_id: str, score: float, day: int = 6) -> Application:
        return Application(
            application_id=app_id,
            candidate_name=f"Candidate {app_id}",
            email=f"{app_id}@example.com",
            application_date=datetime(2025, 1, day, 12, 0, tzinfo=pytz.UTC),
            status=ApplicationStatus.PENDING,
            resume_score=score,
        )
    return _make
