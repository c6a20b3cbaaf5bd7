"""Interview schedule generation."""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Sequence

from models.entities import InterviewSlot, ScheduleDay, ScheduleParameters, ScheduleResult
from models.errors import ValidationError

logger = logging.getLogger(__name__)


class ScheduleGenerator:
    """Assigns candidates to interviewer time slots across a date range."""

    def generate(
        self,
        interviewer_ids: Iterable[str],
        candidate_ids: Sequence[str],
        params: ScheduleParameters
    ) -> ScheduleResult:
        """
        Generate a day-partitioned interview schedule.

        Args:
            interviewer_ids: Selected interviewers, in selection order
            candidate_ids: Candidates to place, in priority order
            params: Scheduling parameters

        Returns:
            ScheduleResult with the placed slots per day and any candidates
            that did not fit

        Raises:
            ValidationError: if no interviewer is selected or params are invalid
        """
        interviewers = list(dict.fromkeys(str(i) for i in interviewer_ids))
        if not interviewers:
            raise ValidationError("no interviewer selected")
        params.validate()

        assignments = {interviewer_id: 0 for interviewer_id in interviewers}
        pending = [str(c) for c in candidate_ids]
        days: list[ScheduleDay] = []

        for slot_date, window_start, _window_end in self.available_windows(params):
            if not pending:
                break

            interviewer_id = self._next_interviewer(interviewers, assignments)
            assignments[interviewer_id] += 1

            slot = InterviewSlot(
                candidate_id=pending.pop(0),
                interviewer_id=interviewer_id,
                start_time=window_start,
                duration_minutes=params.interview_duration
            )

            if not days or days[-1].date != slot_date:
                days.append(ScheduleDay(date=slot_date))
            days[-1].slots.append(slot)

        if pending:
            logger.warning(
                "Capacity exceeded: %d candidate(s) could not be placed between %s and %s",
                len(pending), params.start_date, params.end_date
            )

        return ScheduleResult(days=days, unplaced=pending)

    def available_windows(
        self,
        params: ScheduleParameters
    ) -> Iterator[tuple[date, datetime, datetime]]:
        """Yield (date, start, end) for every bookable window, in time order."""
        tz = params.tz()
        duration_delta = timedelta(minutes=params.interview_duration)

        for current_date in self._working_dates(params):
            day_start = tz.localize(datetime.combine(current_date, params.daily_start_time))
            day_end = tz.localize(datetime.combine(current_date, params.daily_end_time))

            lunch = None
            if params.include_lunch_break:
                lunch = (
                    tz.localize(datetime.combine(current_date, params.lunch_start_time)),
                    tz.localize(datetime.combine(current_date, params.lunch_end_time)),
                )

            # Windows are laid out from the day start; the ones hitting lunch are skipped, not shifted
            current_start = day_start
            while current_start + duration_delta <= day_end:
                current_end = current_start + duration_delta
                if lunch is None or not (current_start < lunch[1] and current_end > lunch[0]):
                    yield current_date, current_start, current_end
                current_start = current_end

    def count_windows(self, params: ScheduleParameters) -> int:
        """Number of bookable windows in the date range."""
        params.validate()
        return sum(1 for _ in self.available_windows(params))

    def _working_dates(self, params: ScheduleParameters) -> Iterator[date]:
        """Dates from start to end inclusive, minus weekends if requested."""
        current_date = params.start_date
        while current_date <= params.end_date:
            if not (params.skip_weekends and current_date.weekday() >= 5):
                yield current_date
            current_date += timedelta(days=1)

    @staticmethod
    def _next_interviewer(interviewers: list[str], assignments: dict[str, int]) -> str:
        """Interviewer with the fewest assignments; ties go to selection order."""
        return min(interviewers, key=lambda i: (assignments[i], interviewers.index(i)))


def generate_schedule(
    interviewer_ids: Iterable[str],
    candidate_ids: Sequence[str],
    params: ScheduleParameters
) -> ScheduleResult:
    """Module-level shortcut for ScheduleGenerator().generate."""
    return ScheduleGenerator().generate(interviewer_ids, candidate_ids, params)
