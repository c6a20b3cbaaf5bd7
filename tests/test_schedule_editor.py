"""Tests for schedule editing and confirmation formatting."""

from dataclasses import replace
from datetime import date, datetime, timedelta

import pytest
import pytz

from models.entities import ConfirmedSlot
from models.errors import ScheduleIndexError, ValidationError
from services.schedule_editor import (
    edit_slot,
    find_overlaps,
    format_email_data,
    format_schedule_for_api,
    toggle_interviewer,
)
from services.schedule_generator import generate_schedule


@pytest.fixture
def schedule(params):
    params.end_date = date(2025, 1, 7)
    return generate_schedule(["A", "B"], [f"c{i}" for i in range(9)], params).days


class TestEditSlot:
    def test_end_time_recomputed_from_duration(self, schedule):
        original_first = schedule[0].slots[0]
        new_start = schedule[0].slots[1].start_time + timedelta(minutes=20)
        updated = replace(schedule[0].slots[1], start_time=new_start, candidate_id="c99")

        edited = edit_slot(schedule, 0, 1, updated, 30)

        slot = edited[0].slots[1]
        assert slot.start_time == new_start
        assert slot.end_time == new_start + timedelta(minutes=30)
        assert slot.candidate_id == "c99"
        assert edited[0].slots[0] is original_first

    def test_input_schedule_not_mutated(self, schedule):
        before = list(schedule[0].slots)
        updated = replace(before[0], interviewer_id="Z")

        edited = edit_slot(schedule, 0, 0, updated, 45)

        assert schedule[0].slots == before
        assert edited[1] is schedule[1]
        assert edited is not schedule

    @pytest.mark.parametrize("day_index,slot_index", [(5, 0), (0, 40), (-1, 0), (0, -1)])
    def test_out_of_range(self, schedule, day_index, slot_index):
        with pytest.raises(ScheduleIndexError):
            edit_slot(schedule, day_index, slot_index, schedule[0].slots[0], 45)

    def test_index_error_is_an_index_error(self, schedule):
        with pytest.raises(IndexError):
            edit_slot(schedule, 9, 0, schedule[0].slots[0], 45)

    def test_overlap_allowed_by_default(self, schedule):
        updated = replace(schedule[0].slots[1], start_time=schedule[0].slots[0].start_time)

        edited = edit_slot(schedule, 0, 1, updated, 45)

        assert find_overlaps(edited[0]) == [(0, 1)]

    def test_overlap_rejected_when_strict(self, schedule):
        updated = replace(schedule[0].slots[1], start_time=schedule[0].slots[0].start_time)
        with pytest.raises(ValidationError):
            edit_slot(schedule, 0, 1, updated, 45, reject_overlaps=True)


def test_toggle_interviewer():
    selected = {"A": False, "B": True}
    assert toggle_interviewer(selected, "A") == {"A": True, "B": True}
    assert selected == {"A": False, "B": True}


def test_format_schedule_for_api_covers_every_day(schedule):
    payload = format_schedule_for_api(schedule, 12)

    assert len(payload) == 9
    first = payload[0]
    assert first["applicationId"] == "c0"
    assert first["interviewerId"] == "A"
    assert first["jobPostingId"] == 12
    assert first["startDateTime"] == "2025-01-06T10:00:00+00:00"
    assert first["endDateTime"] == "2025-01-06T10:45:00+00:00"
    assert first["meetingId"] is None
    assert payload[-1]["startDateTime"].startswith("2025-01-07")


class TestFormatEmailData:
    def test_formats_date_and_time_range(self):
        data = format_email_data([{
            "candidateName": "Jane Doe",
            "candidateEmail": "jane@example.com",
            "jobTitle": "Data Analyst",
            "startDateTime": "2025-01-06T10:00:00.000Z",
            "endDateTime": "2025-01-06T10:45:00.000Z",
            "joinUrl": "https://meet.example.com/x",
            "meetingId": "x",
        }])

        assert data == [{
            "candidateName": "Jane Doe",
            "email": "jane@example.com",
            "jobTitle": "Data Analyst",
            "interviewDate": "January 6, 2025",
            "interviewTime": "10:00 AM to 10:45 AM",
            "meetingLink": "https://meet.example.com/x",
            "meetingId": "x",
        }]

    def test_converts_to_timezone(self):
        start = datetime(2025, 1, 6, 15, 0, tzinfo=pytz.UTC)
        slot = ConfirmedSlot(
            application_id="a1",
            interviewer_id="A",
            start_date_time=start.isoformat(),
            end_date_time=(start + timedelta(minutes=45)).isoformat(),
        )

        data = format_email_data([slot], "America/New_York")

        assert data[0]["interviewTime"] == "10:00 AM to 10:45 AM"
        assert data[0]["candidateName"] == "Candidate"
        assert data[0]["jobTitle"] == "Interview"

    def test_unparsable_slot_skipped(self):
        data = format_email_data([
            {"startDateTime": "garbage", "endDateTime": None},
            {"startDateTime": "2025-01-06T10:00:00Z", "endDateTime": "2025-01-06T10:45:00Z"},
        ])
        assert len(data) == 1

    def test_malformed_entries_skipped(self):
        data = format_email_data([
            {"candidateEmail": "jane@example.com", "startDateTime": "2025-01-06T10:00:00Z",
             "endDateTime": "2025-01-06T10:45:00Z"},
            None,
            "app_002",
        ])
        assert [d["email"] for d in data] == ["jane@example.com"]

    def test_empty_input(self):
        assert format_email_data([]) == []
