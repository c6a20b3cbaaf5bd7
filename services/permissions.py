"""Explicit permission sets for view-model operations."""

from typing import Iterable, Optional

from models.errors import PermissionDeniedError

VIEW_APPLICATIONS = "view_applications"
SCHEDULE_INTERVIEW = "schedule_interview"
SEND_EMAILS = "send_emails"

ALL_PERMISSIONS = frozenset({VIEW_APPLICATIONS, SCHEDULE_INTERVIEW, SEND_EMAILS})

ROLE_PERMISSIONS: dict[str, frozenset] = {
    "ADMIN": ALL_PERMISSIONS,
    "RECRUITER": ALL_PERMISSIONS,
    "HIRING_MANAGER": frozenset({VIEW_APPLICATIONS, SCHEDULE_INTERVIEW}),
    "INTERVIEWER": frozenset({VIEW_APPLICATIONS}),
}


def permissions_for_role(role: Optional[str]) -> frozenset:
    """Permissions granted to a portal role. Unknown roles get none."""
    if not role:
        return frozenset()
    return ROLE_PERMISSIONS.get(role.upper(), frozenset())


def has_permission(granted: Iterable[str], permission: str) -> bool:
    return permission in set(granted)


def require(granted: Iterable[str], permission: str):
    """Raise PermissionDeniedError unless ``permission`` is granted."""
    if not has_permission(granted, permission):
        raise PermissionDeniedError(permission)
