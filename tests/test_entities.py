"""Tests for domain models."""

from datetime import date, datetime, time, timedelta

import pytest
import pytz

from models.entities import (
    Application,
    ApplicationStatus,
    InterviewSlot,
    ScheduleParameters,
    parse_iso_datetime,
)
from models.errors import ValidationError


class TestScheduleParameters:
    def test_from_form(self):
        params = ScheduleParameters.from_form({
            "startDate": "2025-01-06",
            "endDate": "2025-01-10",
            "dailyStartTime": "09:30",
            "dailyEndTime": "16:00",
            "interviewDuration": "30",
            "skipWeekends": "false",
            "includeLunchBreak": True,
            "lunchStartTime": "12:00",
            "lunchEndTime": "12:45",
        })

        assert params.start_date == date(2025, 1, 6)
        assert params.daily_start_time == time(9, 30)
        assert params.interview_duration == 30
        assert params.skip_weekends is False
        assert params.lunch_end_time == time(12, 45)

    def test_from_form_requires_dates(self):
        with pytest.raises(ValidationError, match="start date is required"):
            ScheduleParameters.from_form({"startDate": "", "endDate": "2025-01-06"})

    @pytest.mark.parametrize("duration", [45.0, "45.0", 45])
    def test_from_form_numeric_duration(self, duration):
        params = ScheduleParameters.from_form({
            "startDate": date(2025, 1, 6),
            "endDate": date(2025, 1, 6),
            "dailyStartTime": time(10, 0),
            "interviewDuration": duration,
        })
        assert params.interview_duration == 45

    @pytest.mark.parametrize("field,value", [
        ("dailyStartTime", "ten"),
        ("interviewDuration", "abc"),
        ("interviewDuration", "45.5"),
        ("interviewDuration", "nan"),
        ("endDate", "06/01/2025"),
    ])
    def test_from_form_malformed(self, field, value):
        form = {"startDate": "2025-01-06", "endDate": "2025-01-06", field: value}
        with pytest.raises(ValidationError):
            ScheduleParameters.from_form(form)

    @pytest.mark.parametrize("changes", [
        {"daily_start_time": time(17, 0), "daily_end_time": time(10, 0)},
        {"interview_duration": -5},
        {"lunch_start_time": time(9, 0)},
        {"lunch_start_time": time(14, 0), "lunch_end_time": time(13, 0)},
        {"end_date": date(2025, 1, 5)},
        {"timezone": "Mars/Olympus"},
    ])
    def test_validate_rejects(self, params, changes):
        for name, value in changes.items():
            setattr(params, name, value)
        with pytest.raises(ValidationError):
            params.validate()

    def test_lunch_outside_hours_allowed_when_not_included(self, params):
        params.include_lunch_break = False
        params.lunch_start_time = time(8, 0)
        params.validate()


def test_slot_end_time_is_derived():
    start = datetime(2025, 1, 6, 10, 0, tzinfo=pytz.UTC)
    slot = InterviewSlot("c1", "A", start, 45)

    assert slot.end_time == start + timedelta(minutes=45)
    with pytest.raises(AttributeError):
        slot.end_time = start


def test_application_from_api_defaults():
    application = Application.from_api({
        "applicationId": "a1",
        "applicationDate": "2025-01-06",
        "applicationStatus": "WITHDRAWN",
        "resumeScore": None,
    })
    assert application.status == ApplicationStatus.PENDING
    assert application.resume_score == 0.0


def test_application_from_api_without_date():
    assert Application.from_api({"applicationId": "a1", "resumeScore": 80}).application_date is None
    assert Application.from_api({"applicationId": "a2", "applicationDate": "soon"}).application_date is None


def test_parse_iso_datetime_z_suffix():
    assert parse_iso_datetime("2025-01-06T10:00:00Z").tzinfo is not None
