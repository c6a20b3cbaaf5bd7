"""Recruiting Portal - applications review and interview scheduling."""

import logging
import os
from datetime import date, datetime, timedelta
from typing import Optional

import streamlit as st
from dotenv import load_dotenv

from models.entities import InterviewSlot, ScheduleParameters
from models.errors import PermissionDeniedError, ScheduleIndexError, ValidationError
from services.applications_view import ApplicationsViewModel
from services.cancellation import CancellationToken
from services.email_dispatch import EmailDispatchGateway
from services.interview_scheduler_view import InterviewSchedulerViewModel
from services.permissions import ROLE_PERMISSIONS, SCHEDULE_INTERVIEW, permissions_for_role
from services.portal_api_client import PortalApiClient
from services.portal_api_mock import PortalApiMock
from services.response_formatter import ResponseFormatter
from services.schedule_editor import find_overlaps

# ============================================================================
# CONFIGURATION
# ============================================================================

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("recruiting_portal")

USE_MOCK = os.getenv("PORTAL_USE_MOCK", "1").lower() in ("1", "true", "yes")
PORTAL_TIMEZONE = os.getenv("PORTAL_TIMEZONE", "UTC")
DEFAULT_JOB_ID = os.getenv("PORTAL_JOB_ID", "1")

st.set_page_config(
    page_title="Recruiting Portal",
    page_icon="🗓️",
    layout="wide"
)

# ============================================================================
# SERVICE INITIALIZATION
# ============================================================================

@st.cache_resource
def get_services(_cache_version="v1"):
    """Initialize and cache the API client and email gateway."""
    if USE_MOCK:
        api_client = PortalApiMock()
    else:
        api_client = PortalApiClient()
    gateway = EmailDispatchGateway(api_client)
    return api_client, gateway


api_client, email_gateway = get_services()

# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================

if "page" not in st.session_state:
    st.session_state.page = "applications"
    st.session_state.role = "RECRUITER"
    st.session_state.applications_vm = None
    st.session_state.scheduler_vm = None
    st.session_state.page_token = CancellationToken()
    st.session_state.selection_version = 0
    st.session_state.notifications = []

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def current_permissions() -> frozenset:
    return permissions_for_role(st.session_state.role)


def switch_page(page: str):
    """Leave the current page; responses still in flight for it are dropped."""
    st.session_state.page_token.cancel()
    st.session_state.page_token = CancellationToken()
    st.session_state.page = page


def notify(notification):
    st.session_state.notifications.append(notification)


def show_notifications():
    """Show and clear queued notifications."""
    for notification in st.session_state.notifications:
        text = ResponseFormatter.format_notification(notification)
        if notification.level == "success":
            st.success(text)
        elif notification.level == "warning":
            st.warning(text)
        elif notification.level == "error":
            st.error(text)
        else:
            st.info(text)
    st.session_state.notifications = []


def candidate_name(application_id: str) -> str:
    vm = st.session_state.applications_vm
    if vm:
        for application in vm.applications:
            if application.application_id == application_id:
                return application.candidate_name
    return application_id


def get_applications_vm(job_id: str) -> Optional[ApplicationsViewModel]:
    """Create or reuse the applications view-model for the job."""
    vm = st.session_state.applications_vm
    if vm is None or str(vm.job_id) != str(job_id) or vm.permissions != current_permissions():
        vm = ApplicationsViewModel(job_id, current_permissions())
        with st.spinner("Loading Applications..."):
            vm.load(api_client, st.session_state.page_token)
        st.session_state.applications_vm = vm
    return vm


def bump_selection_version():
    # Checkbox widgets are keyed on this so they pick up programmatic changes
    st.session_state.selection_version += 1

# ============================================================================
# PAGES
# ============================================================================

def render_applications_page():
    """Applications list with filters and multi-select."""
    job_id = st.sidebar.text_input("Job posting ID", value=DEFAULT_JOB_ID)

    try:
        vm = get_applications_vm(job_id)
    except PermissionDeniedError:
        st.session_state.applications_vm = None
        st.error("Unauthorized to view applications")
        return

    if vm.error:
        st.error(vm.error)
        return

    header_col, action_col = st.columns([3, 1])
    with header_col:
        st.title("Applications")
    with action_col:
        if SCHEDULE_INTERVIEW in vm.permissions:
            if st.button(
                f"🗓️ Schedule Interviews ({vm.selected_count} selected)",
                disabled=vm.selected_count == 0,
                use_container_width=True
            ):
                st.session_state.scheduler_state = vm.schedule_interviews()
                st.session_state.scheduler_vm = None
                switch_page("scheduler")
                st.rerun()

    # Filters
    with st.container(border=True):
        st.subheader("Filters")
        date_col, score_col, limit_col = st.columns(3)
        with date_col:
            start = st.date_input("From", value=vm.filters.date_start, key="filter_start")
            end = st.date_input("To", value=vm.filters.date_end, key="filter_end")
        with score_col:
            min_score = st.text_input(
                "Min Score",
                value="" if vm.filters.min_score is None else f"{vm.filters.min_score:g}",
                key="filter_min"
            )
            max_score = st.text_input(
                "Max Score",
                value="" if vm.filters.max_score is None else f"{vm.filters.max_score:g}",
                key="filter_max"
            )
        with limit_col:
            limit = st.text_input(
                "Limit Results",
                value="" if vm.filters.limit is None else str(vm.filters.limit),
                key="filter_limit"
            )
            if st.button("Reset Filters", use_container_width=True):
                vm.reset_filters()
                for key in ("filter_start", "filter_end", "filter_min", "filter_max", "filter_limit"):
                    st.session_state.pop(key, None)
                st.rerun()

        vm.set_date_filter("start", start)
        vm.set_date_filter("end", end)
        vm.set_filter("minScore", min_score)
        vm.set_filter("maxScore", max_score)
        vm.set_filter("limit", limit)

    filtered = vm.filtered()
    version = st.session_state.selection_version

    st.checkbox(
        "Select All",
        value=vm.select_all_flag,
        key=f"select_all_{version}",
        on_change=lambda: (vm.toggle_select_all(), bump_selection_version())
    )

    columns = [0.6, 2, 3, 2, 1.5, 1, 2]
    header = st.columns(columns)
    for col, label in zip(header, ["", "Candidate Name", "Email", "Application Date", "Status", "Score", "Resume"]):
        col.markdown(f"**{label}**")

    for index, application in enumerate(filtered, 1):
        row = st.columns(columns)
        row[0].checkbox(
            str(index),
            value=vm.is_selected(application.application_id),
            key=f"sel_{application.application_id}_{version}",
            on_change=vm.toggle,
            args=(application.application_id,)
        )
        row[1].write(application.candidate_name)
        row[2].write(application.email)
        applied_on = application.application_date
        row[3].write(applied_on.strftime("%Y-%m-%d") if applied_on else "N/A")
        row[4].write(application.status.value)
        row[5].write(f"{application.resume_score:g}")
        row[6].write(str(application.resume or ""))

    st.caption(f"Showing {len(filtered)} of {len(vm.applications)} application(s)")


def get_scheduler_vm() -> InterviewSchedulerViewModel:
    """Create or reuse the scheduler view-model from the navigation state."""
    vm = st.session_state.scheduler_vm
    if vm is None:
        state = st.session_state.get("scheduler_state") or {}
        today = date.today()
        vm = InterviewSchedulerViewModel(
            selected_applications=state.get("selectedApplications", []),
            job_posting_id=state.get("jobPostingId", 1),
            params=ScheduleParameters(
                start_date=today,
                end_date=today + timedelta(days=7),
                timezone=PORTAL_TIMEZONE
            ),
            permissions=current_permissions()
        )
        with st.spinner("Please wait..."):
            vm.load_interviewers(api_client, st.session_state.page_token)
        st.session_state.scheduler_vm = vm
    return vm


def render_parameters_form(vm: InterviewSchedulerViewModel):
    """Scheduling parameters; generates the schedule on submit."""
    with st.form("schedule_params"):
        params = vm.params
        date_col, hours_col, lunch_col = st.columns(3)
        with date_col:
            start_date = st.date_input("Start date", value=params.start_date)
            end_date = st.date_input("End date", value=params.end_date)
            skip_weekends = st.checkbox("Skip weekends", value=params.skip_weekends)
        with hours_col:
            daily_start = st.time_input("Daily start", value=params.daily_start_time, step=900)
            daily_end = st.time_input("Daily end", value=params.daily_end_time, step=900)
            duration = st.number_input(
                "Interview duration (minutes)", min_value=1, value=params.interview_duration, step=5
            )
        with lunch_col:
            include_lunch = st.checkbox("Include lunch break", value=params.include_lunch_break)
            lunch_start = st.time_input("Lunch start", value=params.lunch_start_time, step=900)
            lunch_end = st.time_input("Lunch end", value=params.lunch_end_time, step=900)

        if not st.form_submit_button("Generate Schedule", type="primary"):
            return

    try:
        vm.params = ScheduleParameters.from_form({
            "startDate": start_date,
            "endDate": end_date,
            "dailyStartTime": daily_start,
            "dailyEndTime": daily_end,
            "interviewDuration": duration,
            "skipWeekends": skip_weekends,
            "includeLunchBreak": include_lunch,
            "lunchStartTime": lunch_start,
            "lunchEndTime": lunch_end,
            "timezone": PORTAL_TIMEZONE,
        })
        _, notification = vm.generate()
    except ValidationError as e:
        st.error(f"❌ {e}")
        return
    except PermissionDeniedError:
        st.error("❌ You are not allowed to schedule interviews")
        return
    if notification:
        notify(notification)


def render_slot_editor(vm: InterviewSchedulerViewModel, day_index: int, slot_index: int, slot: InterviewSlot):
    """Edit form for a single slot."""
    candidates = vm.selected_applications
    interviewer_ids = [interviewer.id for interviewer in vm.interviewers]
    local_start = slot.start_time.astimezone(vm.params.tz())

    with st.form(f"edit_{day_index}_{slot_index}"):
        cand_col, int_col, time_col = st.columns(3)
        candidate_id = cand_col.selectbox(
            "Candidate",
            candidates,
            index=candidates.index(slot.candidate_id) if slot.candidate_id in candidates else 0,
            format_func=candidate_name
        )
        interviewer_id = int_col.selectbox(
            "Interviewer",
            interviewer_ids,
            index=interviewer_ids.index(slot.interviewer_id) if slot.interviewer_id in interviewer_ids else 0,
            format_func=vm.interviewer_name
        )
        new_time = time_col.time_input("Start", value=local_start.time(), step=300)
        strict = st.checkbox("Reject if it overlaps another interview", value=False)

        if st.form_submit_button("Save"):
            start_time = vm.params.tz().localize(datetime.combine(local_start.date(), new_time))
            updated = InterviewSlot(
                candidate_id=candidate_id,
                interviewer_id=interviewer_id,
                start_time=start_time,
                duration_minutes=vm.params.interview_duration
            )
            try:
                vm.edit(day_index, slot_index, updated, reject_overlaps=strict)
            except (ValidationError, ScheduleIndexError) as e:
                st.error(f"❌ {e}")
                return
            st.rerun()


def render_scheduler_page():
    """Interviewer selection, schedule generation, editing and confirmation."""
    vm = get_scheduler_vm()

    if st.button("← Back to applications"):
        switch_page("applications")
        st.rerun()

    st.title("Schedule Interviews")
    show_notifications()

    if vm.error:
        st.error(vm.error)
        return

    int_col, cand_col = st.columns(2)
    with int_col:
        st.subheader("Interviewers")
        for interviewer in vm.interviewers:
            st.checkbox(
                interviewer.name,
                value=vm.selected_interviewers.get(interviewer.id, False),
                key=f"interviewer_{interviewer.id}",
                on_change=vm.toggle_interviewer,
                args=(interviewer.id,)
            )
    with cand_col:
        st.subheader("Candidates")
        if not vm.selected_applications:
            st.info("No candidates selected. Go back and pick some applications.")
        for application_id in vm.selected_applications:
            st.markdown(f"• {candidate_name(application_id)}")

    render_parameters_form(vm)

    if vm.unplaced:
        st.warning(ResponseFormatter.format_unplaced(vm.unplaced, candidate_name))

    if not vm.editable_schedule:
        return

    st.subheader("Editable Schedule")
    for day_index, day in enumerate(vm.editable_schedule):
        st.markdown(ResponseFormatter.format_schedule_day(
            day,
            candidate_name,
            vm.interviewer_name,
            vm.params.timezone,
            overlaps=find_overlaps(day)
        ))
        for slot_index, slot in enumerate(day.slots):
            with st.expander(f"Edit interview {slot_index + 1}", expanded=False):
                render_slot_editor(vm, day_index, slot_index, slot)

    send_email = st.checkbox("Email candidates after confirming", value=True)
    if st.button("Confirm Schedule", type="primary"):
        logger.info("Confirming schedule for job %s", vm.job_posting_id)
        with st.spinner("Confirming..."):
            try:
                notification = vm.confirm(api_client, send_email, email_gateway)
            except PermissionDeniedError as e:
                st.error(f"❌ {e}")
                return
        notify(notification)
        st.rerun()

    if USE_MOCK and api_client.get_sent_emails():
        with st.expander("Sent emails", expanded=False):
            for email_record in api_client.get_sent_emails():
                st.markdown(ResponseFormatter.format_sent_email(email_record))

# ============================================================================
# MAIN
# ============================================================================

with st.sidebar:
    st.header("🗓️ Recruiting Portal")
    role = st.selectbox(
        "Signed in as",
        list(ROLE_PERMISSIONS),
        index=list(ROLE_PERMISSIONS).index(st.session_state.role)
    )
    if role != st.session_state.role:
        st.session_state.role = role
        st.session_state.applications_vm = None
        st.session_state.scheduler_vm = None
    st.caption("Mock data" if USE_MOCK else f"API: {api_client.base_url}")

if st.session_state.page == "scheduler":
    render_scheduler_page()
else:
    render_applications_page()
