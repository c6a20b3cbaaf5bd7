"""Editing a generated schedule and preparing it for confirmation."""

import logging
from dataclasses import replace
from typing import Any, Iterable, Optional, Union

import pytz

from models.entities import ConfirmedSlot, InterviewSlot, ScheduleDay, parse_iso_datetime
from models.errors import ScheduleIndexError, ValidationError

logger = logging.getLogger(__name__)


def toggle_interviewer(selected: dict[str, bool], interviewer_id: str) -> dict[str, bool]:
    """Return a copy of the selection with one interviewer flipped."""
    return {**selected, interviewer_id: not selected.get(interviewer_id, False)}


def edit_slot(
    schedule: list[ScheduleDay],
    day_index: int,
    slot_index: int,
    updated_slot: InterviewSlot,
    duration: int,
    reject_overlaps: bool = False
) -> list[ScheduleDay]:
    """
    Replace one slot of a schedule.

    The end time is recomputed from the new start time and ``duration``.
    Other days and slots are left untouched and the input is not mutated.

    Args:
        schedule: Current schedule
        day_index: Index of the day to edit
        slot_index: Index of the slot within that day
        updated_slot: New candidate, interviewer and start time
        duration: Interview duration in minutes
        reject_overlaps: Raise if the edited slot overlaps a sibling slot

    Returns:
        New schedule

    Raises:
        ScheduleIndexError: if either index is out of range
        ValidationError: if ``reject_overlaps`` is set and the slot overlaps
    """
    if not 0 <= day_index < len(schedule):
        raise ScheduleIndexError(f"No schedule day at index {day_index}")
    day = schedule[day_index]
    if not 0 <= slot_index < len(day.slots):
        raise ScheduleIndexError(f"No slot at index {slot_index} on {day.date}")

    new_slot = replace(updated_slot, duration_minutes=duration)
    new_slots = list(day.slots)
    new_slots[slot_index] = new_slot

    if reject_overlaps:
        for index, sibling in enumerate(new_slots):
            if index != slot_index and sibling.overlaps(new_slot):
                raise ValidationError(
                    f"Slot overlaps with slot {index} on {day.date}"
                )

    new_schedule = list(schedule)
    new_schedule[day_index] = replace(day, slots=new_slots)
    return new_schedule


def find_overlaps(day: ScheduleDay) -> list[tuple[int, int]]:
    """Index pairs of slots in a day that overlap each other."""
    overlaps = []
    for i, first in enumerate(day.slots):
        for j in range(i + 1, len(day.slots)):
            if first.overlaps(day.slots[j]):
                overlaps.append((i, j))
    return overlaps


def format_schedule_for_api(
    schedule: list[ScheduleDay],
    job_posting_id: Union[str, int]
) -> list[dict[str, Any]]:
    """Flatten every day of the schedule into the confirmation payload."""
    return [
        {
            "applicationId": slot.candidate_id,
            "jobPostingId": job_posting_id,
            "interviewerId": slot.interviewer_id,
            "startDateTime": slot.start_time.isoformat(),
            "endDateTime": slot.end_time.isoformat(),
            "meetingId": slot.meeting_id,
            "joinUrl": slot.join_url,
        }
        for day in schedule
        for slot in day.slots
    ]


def _format_date(value) -> str:
    # e.g. "January 6, 2025"
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def _format_time(value) -> str:
    return value.strftime("%I:%M %p")


def format_email_data(
    schedules: Iterable[Union[ConfirmedSlot, dict[str, Any]]],
    timezone: str = "UTC"
) -> list[dict[str, Optional[str]]]:
    """
    Turn confirmed slots into the per-candidate data for interview emails.

    Malformed entries and slots whose times cannot be parsed are logged
    and skipped.

    Args:
        schedules: Confirmed slots, as entities or raw API dicts
        timezone: Timezone the date and time are shown in

    Returns:
        List of dicts with candidateName, email, jobTitle, interviewDate,
        interviewTime, meetingLink and meetingId
    """
    schedules = list(schedules or [])
    if not schedules:
        logger.error("Invalid or empty schedules list: %r", schedules)
        return []

    tz = pytz.timezone(timezone)
    email_data = []

    for schedule in schedules:
        try:
            confirmed = schedule if isinstance(schedule, ConfirmedSlot) else ConfirmedSlot.from_api(schedule)
            start = _localize(parse_iso_datetime(confirmed.start_date_time), tz)
            end = _localize(parse_iso_datetime(confirmed.end_date_time), tz)
            interview_day = start
            if confirmed.interview_date:
                # A bare date is a calendar day already, only shift aware values
                parsed = parse_iso_datetime(confirmed.interview_date)
                interview_day = parsed if parsed.tzinfo is None else parsed.astimezone(tz)
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Error formatting schedule %r: %s", schedule, e)
            continue

        email_data.append({
            "candidateName": confirmed.candidate_name or "Candidate",
            "email": confirmed.candidate_email,
            "jobTitle": confirmed.job_title or "Interview",
            "interviewDate": _format_date(interview_day),
            "interviewTime": f"{_format_time(start)} to {_format_time(end)}",
            "meetingLink": confirmed.join_url,
            "meetingId": confirmed.meeting_id,
        })

    return email_data


def _localize(value, tz):
    """Convert to ``tz``; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    return value.astimezone(tz)
