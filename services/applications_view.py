"""Applications list: filtering and multi-select."""

import logging
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from models.entities import Application, FilterSpec
from models.errors import NetworkError
from services.cancellation import CancellationToken
from services.permissions import SCHEDULE_INTERVIEW, VIEW_APPLICATIONS, require

logger = logging.getLogger(__name__)


def _calendar_date(value):
    return value.date() if isinstance(value, datetime) else value


def filter_applications(applications: Iterable[Application], spec: FilterSpec) -> list[Application]:
    """
    Apply date range, score range and limit filters.

    Every bound is inclusive and only applied when set. Applications
    without a date are not subject to the date bounds. The result keeps
    the input order and is cut to ``spec.limit`` when that is positive.
    """
    filtered = []
    for app in applications:
        applied_on = _calendar_date(app.application_date)

        if applied_on is not None:
            if spec.date_start is not None and applied_on < spec.date_start:
                continue
            if spec.date_end is not None and applied_on > spec.date_end:
                continue
        if spec.min_score is not None and app.resume_score < spec.min_score:
            continue
        if spec.max_score is not None and app.resume_score > spec.max_score:
            continue

        filtered.append(app)

    if spec.limit is not None and spec.limit > 0:
        filtered = filtered[:spec.limit]
    return filtered


def toggle_selection(selection: dict[str, bool], application_id: str) -> dict[str, bool]:
    """Return a copy of the selection with one application flipped."""
    return {**selection, application_id: not selection.get(application_id, False)}


def select_all(
    selection: dict[str, bool],
    filtered_view: Iterable[Application],
    flag: bool
) -> dict[str, bool]:
    """Set every application in the filtered view to ``flag``; leave the rest alone."""
    updated = dict(selection)
    for app in filtered_view:
        updated[app.application_id] = flag
    return updated


def selected_ids(selection: dict[str, bool]) -> list[str]:
    """Selected application ids in the order they were first touched."""
    return [app_id for app_id, selected in selection.items() if selected]


def selected_count(selection: dict[str, bool]) -> int:
    return len(selected_ids(selection))


class ApplicationsViewModel:
    """Session state of the applications page for one job posting."""

    def __init__(self, job_id: Union[str, int], permissions: Iterable[str]):
        self.job_id = job_id
        self.permissions = frozenset(permissions)
        self.applications: list[Application] = []
        self.filters = FilterSpec.initial()
        self.selection: dict[str, bool] = {}
        self.select_all_flag = False
        self.loading = False
        self.error: Optional[str] = None

    def load(self, api_client, token: Optional[CancellationToken] = None) -> bool:
        """
        Fetch the job's applications.

        Returns:
            True if the result was applied, False if the token was cancelled
            before the response arrived

        Raises:
            PermissionDeniedError: without the view_applications permission
        """
        require(self.permissions, VIEW_APPLICATIONS)
        token = token or CancellationToken()

        self.loading = True
        try:
            applications = api_client.get_applications(self.job_id)
        except NetworkError as e:
            logger.error("Failed to fetch applications for job %s: %s", self.job_id, e)
            return token.commit(self._apply_failure, str(e) or "Failed to fetch applications")
        finally:
            self.loading = False

        return token.commit(self._apply_applications, applications)

    def _apply_applications(self, applications: list[Application]):
        self.applications = applications
        self.error = None

    def _apply_failure(self, message: str):
        self.applications = []
        self.error = message

    def set_filter(self, name: str, value: Any):
        """Update one filter from a raw form value (minScore, maxScore or limit)."""
        form = {
            "minScore": self.filters.min_score,
            "maxScore": self.filters.max_score,
            "limit": self.filters.limit,
            "dateRange": {"start": self.filters.date_start, "end": self.filters.date_end},
        }
        form[name] = value
        self.filters = FilterSpec.from_form(form)

    def set_date_filter(self, name: str, value: Any):
        """Update ``start`` or ``end`` of the date range from a raw form value."""
        date_range = {"start": self.filters.date_start, "end": self.filters.date_end}
        date_range[name] = value
        self.filters = FilterSpec.from_form({
            "minScore": self.filters.min_score,
            "maxScore": self.filters.max_score,
            "limit": self.filters.limit,
            "dateRange": date_range,
        })

    def reset_filters(self):
        """Clear every filter."""
        self.filters = FilterSpec()

    def filtered(self) -> list[Application]:
        """Applications visible under the current filters."""
        return filter_applications(self.applications, self.filters)

    def toggle(self, application_id: str):
        self.selection = toggle_selection(self.selection, application_id)

    def toggle_select_all(self):
        """Flip the select-all checkbox and apply it to the visible applications."""
        self.select_all_flag = not self.select_all_flag
        self.selection = select_all(self.selection, self.filtered(), self.select_all_flag)

    def is_selected(self, application_id: str) -> bool:
        return self.selection.get(application_id, False)

    @property
    def selected_count(self) -> int:
        return selected_count(self.selection)

    def schedule_interviews(self) -> dict[str, Any]:
        """
        State handed to the interview scheduler.

        Raises:
            PermissionDeniedError: without the schedule_interview permission
        """
        require(self.permissions, SCHEDULE_INTERVIEW)
        return {
            "selectedApplications": selected_ids(self.selection),
            "jobPostingId": self.job_id,
        }
