"""Domain models for the recruiting portal."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Iterator, Literal, Optional

import pytz

from models.errors import CapacityError, ValidationError


def parse_iso_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) or pass a datetime through."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _parse_time(value: Any, label: str) -> time:
    if isinstance(value, time):
        return value
    try:
        hours, minutes = str(value).strip().split(":")[:2]
        return time(int(hours), int(minutes))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}: {value!r}")


def _parse_date(value: Any, label: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{label} is required")
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value!r}")


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class ApplicationStatus(str, Enum):
    """Status of a job application."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    SCHEDULED = "SCHEDULED"


@dataclass
class Application:
    """A job application as returned by the portal API."""
    application_id: str
    candidate_name: str
    email: str
    application_date: Optional[datetime]
    status: ApplicationStatus
    resume_score: float
    resume: Optional[Any] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Application":
        """
        Map a camelCase API payload to an Application.

        A missing or unparsable applicationDate maps to None.
        """
        try:
            status = ApplicationStatus(str(data.get("applicationStatus", "")).upper())
        except ValueError:
            status = ApplicationStatus.PENDING

        try:
            score = float(data.get("resumeScore"))
        except (TypeError, ValueError):
            score = 0.0

        return cls(
            application_id=str(data.get("applicationId", "")),
            candidate_name=data.get("candidateName", ""),
            email=data.get("email", ""),
            application_date=_optional_datetime(data.get("applicationDate")),
            status=status,
            resume_score=score,
            resume=data.get("resume"),
        )


@dataclass
class Interviewer:
    """An interviewer that can be selected for a scheduling session."""
    id: str
    name: str
    email: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Interviewer":
        """Map an API payload to an Interviewer."""
        name = data.get("name") or data.get("fullName") or data.get("email") or ""
        return cls(id=str(data.get("id", "")), name=name, email=data.get("email"))


@dataclass
class ScheduleParameters:
    """Parameters for generating an interview schedule."""
    start_date: date
    end_date: date
    daily_start_time: time = time(10, 0)
    daily_end_time: time = time(17, 0)
    interview_duration: int = 45  # minutes
    skip_weekends: bool = True
    include_lunch_break: bool = True
    lunch_start_time: time = time(13, 0)
    lunch_end_time: time = time(14, 0)
    timezone: str = "UTC"

    @classmethod
    def from_form(cls, form: dict[str, Any]) -> "ScheduleParameters":
        """
        Build parameters from the scheduling form's raw values.

        Args:
            form: camelCase keys as submitted by the form, values may be strings

        Returns:
            Validated ScheduleParameters

        Raises:
            ValidationError: if any value is missing or malformed
        """
        raw_duration = form.get("interviewDuration", 45)
        try:
            number = float(str(raw_duration).strip())
        except ValueError:
            number = None
        if number is None or not number.is_integer():
            raise ValidationError(f"Invalid interview duration: {raw_duration!r}")
        duration = int(number)

        params = cls(
            start_date=_parse_date(form.get("startDate"), "start date"),
            end_date=_parse_date(form.get("endDate"), "end date"),
            daily_start_time=_parse_time(form.get("dailyStartTime", "10:00"), "daily start time"),
            daily_end_time=_parse_time(form.get("dailyEndTime", "17:00"), "daily end time"),
            interview_duration=duration,
            skip_weekends=_parse_flag(form.get("skipWeekends", True)),
            include_lunch_break=_parse_flag(form.get("includeLunchBreak", True)),
            lunch_start_time=_parse_time(form.get("lunchStartTime", "13:00"), "lunch start time"),
            lunch_end_time=_parse_time(form.get("lunchEndTime", "14:00"), "lunch end time"),
            timezone=form.get("timezone") or "UTC",
        )
        params.validate()
        return params

    def validate(self):
        """Raise ValidationError if the parameters are inconsistent."""
        if self.interview_duration <= 0:
            raise ValidationError("Interview duration must be positive")
        if self.daily_start_time >= self.daily_end_time:
            raise ValidationError("Daily start time must be before daily end time")
        if self.start_date > self.end_date:
            raise ValidationError("Start date must not be after end date")
        if self.include_lunch_break:
            if self.lunch_start_time >= self.lunch_end_time:
                raise ValidationError("Lunch start time must be before lunch end time")
            if (
                self.lunch_start_time < self.daily_start_time
                or self.lunch_end_time > self.daily_end_time
            ):
                raise ValidationError("Lunch break must lie within working hours")
        try:
            pytz.timezone(self.timezone)
        except pytz.UnknownTimeZoneError:
            raise ValidationError(f"Unknown timezone: {self.timezone}")

    def tz(self):
        """pytz timezone for slot datetimes."""
        return pytz.timezone(self.timezone)


@dataclass
class InterviewSlot:
    """One interview: a candidate, an interviewer and a time window."""
    candidate_id: str
    interviewer_id: str
    start_time: datetime
    duration_minutes: int
    meeting_id: Optional[str] = None
    join_url: Optional[str] = None

    @property
    def end_time(self) -> datetime:
        """End time, always derived from start and duration."""
        return self.start_time + timedelta(minutes=self.duration_minutes)

    def overlaps(self, other: "InterviewSlot") -> bool:
        """Whether the two slots share any time."""
        return self.start_time < other.end_time and other.start_time < self.end_time


@dataclass
class ScheduleDay:
    """Ordered interview slots for one calendar date."""
    date: date
    slots: list[InterviewSlot] = field(default_factory=list)


@dataclass
class ScheduleResult:
    """Output of schedule generation."""
    days: list[ScheduleDay]
    unplaced: list[str] = field(default_factory=list)

    @property
    def capacity_error(self) -> Optional[CapacityError]:
        """CapacityError describing unplaced candidates, if any."""
        if not self.unplaced:
            return None
        return CapacityError(self.unplaced)

    def slots(self) -> Iterator[InterviewSlot]:
        """Iterate over all slots, day by day."""
        for day in self.days:
            yield from day.slots


@dataclass
class FilterSpec:
    """Filters for the applications list. None means not applied."""
    date_start: Optional[date] = None
    date_end: Optional[date] = None
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    limit: Optional[int] = None

    @classmethod
    def initial(cls) -> "FilterSpec":
        """Filters shown when the applications page first loads."""
        return cls(min_score=0.0, max_score=100.0)

    @classmethod
    def from_form(cls, form: dict[str, Any]) -> "FilterSpec":
        """
        Build a FilterSpec from raw form strings.

        Malformed values are treated as absent rather than rejected.
        """
        date_range = form.get("dateRange") or {}
        return cls(
            date_start=_optional_date(date_range.get("start", form.get("start"))),
            date_end=_optional_date(date_range.get("end", form.get("end"))),
            min_score=_optional_float(form.get("minScore")),
            max_score=_optional_float(form.get("maxScore")),
            limit=_optional_int(form.get("limit")),
        )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # NaN never compares true, so it cannot act as a bound
    if number != number:
        return None
    return number


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _optional_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parse_iso_datetime(value)
    except ValueError:
        return None


def _optional_date(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return _parse_date(value, "date")
    except ValidationError:
        return None


@dataclass
class Recipient:
    """Email recipient."""
    name: str
    email: str


@dataclass
class Envelope:
    """Normalised payload for the email dispatch endpoint."""
    template_name: str
    recipients: list[Recipient]
    variables: dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Wire format expected by ``POST /google/send-emails``."""
        return {
            "templateName": self.template_name,
            "recipients": [{"name": r.name, "email": r.email} for r in self.recipients],
            "variables": dict(self.variables),
        }


@dataclass
class DispatchResult:
    """Result of an email dispatch call."""
    success: bool
    envelopes_sent: int
    payload: Any = None


@dataclass
class ConfirmedSlot:
    """A slot as echoed back by the portal after confirmation."""
    application_id: str
    interviewer_id: str
    start_date_time: Optional[str]
    end_date_time: Optional[str]
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    job_title: Optional[str] = None
    meeting_id: Optional[str] = None
    join_url: Optional[str] = None
    interview_date: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ConfirmedSlot":
        """Map an API payload to a ConfirmedSlot."""
        return cls(
            application_id=str(data.get("applicationId", "")),
            interviewer_id=str(data.get("interviewerId", "")),
            start_date_time=data.get("startDateTime"),
            end_date_time=data.get("endDateTime"),
            candidate_name=data.get("candidateName"),
            candidate_email=data.get("candidateEmail") or data.get("email"),
            job_title=data.get("jobTitle"),
            meeting_id=data.get("meetingId"),
            join_url=data.get("joinUrl") or data.get("meetingLink"),
            interview_date=data.get("interviewDate"),
        )


@dataclass
class Notification:
    """A transient message for the user."""
    level: Literal["success", "warning", "error", "info"]
    message: str
