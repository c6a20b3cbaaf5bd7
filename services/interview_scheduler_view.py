"""Interview scheduling session: interviewers, schedule, confirmation."""

import logging
from typing import Any, Iterable, Optional, Union

from models.entities import (
    InterviewSlot,
    Interviewer,
    Notification,
    ScheduleDay,
    ScheduleParameters,
    ScheduleResult,
)
from models.errors import DispatchError, NetworkError, ValidationError
from services.cancellation import CancellationToken
from services.email_dispatch import EmailDispatchGateway
from services.permissions import SCHEDULE_INTERVIEW, SEND_EMAILS, require
from services.schedule_editor import (
    edit_slot,
    find_overlaps,
    format_email_data,
    format_schedule_for_api,
    toggle_interviewer,
)
from services.schedule_generator import ScheduleGenerator

logger = logging.getLogger(__name__)


class InterviewSchedulerViewModel:
    """Session state of the interview scheduler page."""

    def __init__(
        self,
        selected_applications: list[str],
        job_posting_id: Union[str, int],
        params: ScheduleParameters,
        permissions: Iterable[str],
        generator: Optional[ScheduleGenerator] = None
    ):
        """
        Initialize a scheduling session.

        Args:
            selected_applications: Application ids handed over by the
                applications page
            job_posting_id: Job posting the interviews belong to
            params: Initial scheduling parameters
            permissions: Permissions granted to the current user
            generator: Schedule generator (a default one if omitted)
        """
        self.selected_applications = [str(a) for a in selected_applications]
        self.job_posting_id = job_posting_id
        self.params = params
        self.permissions = frozenset(permissions)
        self.generator = generator or ScheduleGenerator()

        self.interviewers: list[Interviewer] = []
        self.selected_interviewers: dict[str, bool] = {}
        self.generated_schedule: list[ScheduleDay] = []
        self.editable_schedule: list[ScheduleDay] = []
        self.unplaced: list[str] = []
        self.error: Optional[str] = None

    def load_interviewers(self, api_client, token: Optional[CancellationToken] = None) -> bool:
        """Fetch interviewers; every interviewer starts unselected."""
        token = token or CancellationToken()
        try:
            interviewers = api_client.get_interviewers()
        except NetworkError as e:
            logger.error("Failed to fetch interviewers: %s", e)
            return token.commit(self._apply_failure, "Failed to fetch interviewers")
        return token.commit(self._apply_interviewers, interviewers)

    def _apply_interviewers(self, interviewers: list[Interviewer]):
        self.interviewers = interviewers
        self.selected_interviewers = {interviewer.id: False for interviewer in interviewers}
        self.error = None

    def _apply_failure(self, message: str):
        self.error = message

    def toggle_interviewer(self, interviewer_id: str):
        self.selected_interviewers = toggle_interviewer(self.selected_interviewers, interviewer_id)

    def selected_interviewer_ids(self) -> list[str]:
        return [i for i, selected in self.selected_interviewers.items() if selected]

    def interviewer_name(self, interviewer_id: str) -> str:
        for interviewer in self.interviewers:
            if interviewer.id == interviewer_id:
                return interviewer.name
        return interviewer_id

    def generate(self) -> tuple[ScheduleResult, Optional[Notification]]:
        """
        Generate a schedule for the selected applications.

        Returns:
            (result, notification) where notification warns about candidates
            that did not fit, or is None

        Raises:
            PermissionDeniedError: without the schedule_interview permission
            ValidationError: if no interviewer is selected or params are invalid
        """
        require(self.permissions, SCHEDULE_INTERVIEW)
        result = self.generator.generate(
            self.selected_interviewer_ids(),
            self.selected_applications,
            self.params
        )

        self.generated_schedule = result.days
        self.editable_schedule = list(result.days)
        self.unplaced = list(result.unplaced)

        notification = None
        if result.capacity_error:
            notification = Notification(
                "warning",
                f"Not enough slots: {len(result.unplaced)} candidate(s) still need to be scheduled"
            )
        return result, notification

    def edit(
        self,
        day_index: int,
        slot_index: int,
        updated_slot: InterviewSlot,
        reject_overlaps: bool = False
    ) -> list[tuple[int, int]]:
        """
        Edit one slot of the editable schedule.

        Returns:
            Overlapping slot index pairs of the edited day, for flagging
        """
        self.editable_schedule = edit_slot(
            self.editable_schedule,
            day_index,
            slot_index,
            updated_slot,
            self.params.interview_duration,
            reject_overlaps=reject_overlaps
        )
        return find_overlaps(self.editable_schedule[day_index])

    def confirm(self, api_client, send_email: bool, gateway: Optional[EmailDispatchGateway] = None) -> Notification:
        """
        Confirm the editable schedule and optionally email the candidates.

        Network and dispatch failures are logged and reported as an error
        notification; the schedule is left as it was.

        Raises:
            PermissionDeniedError: without schedule_interview, or send_emails
                when ``send_email`` is set
        """
        require(self.permissions, SCHEDULE_INTERVIEW)
        if send_email:
            require(self.permissions, SEND_EMAILS)

        schedules = format_schedule_for_api(self.editable_schedule, self.job_posting_id)
        logger.debug("Sending schedules: %s", schedules)

        try:
            response: dict[str, Any] = api_client.confirm_schedule(schedules)
            if not isinstance(response, dict):
                logger.error("Unexpected confirmation response: %r", response)
                return Notification("error", "Failed to schedule interviews")
            if not response.get("success"):
                return Notification("error", response.get("message") or "Failed to schedule interviews")

            confirmed = response.get("schedules") or []
            if not (send_email and confirmed):
                return Notification("success", "Interviews scheduled successfully")

            email_data = format_email_data(confirmed, self.params.timezone)
            if not email_data:
                return Notification("error", "No valid email data generated")

            gateway = gateway or EmailDispatchGateway(api_client)
            result = gateway.send_interview_scheduled(email_data)
        except (NetworkError, DispatchError, ValidationError) as e:
            logger.error("Error confirming schedule: %s", e)
            return Notification("error", str(e) or "Failed to schedule interviews")

        if result.success:
            return Notification("success", "Interviews scheduled and emails sent successfully")
        return Notification("warning", "Interviews scheduled but some emails failed to send")
