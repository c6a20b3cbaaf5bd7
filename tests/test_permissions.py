"""Tests for permission sets and soft cancellation."""

import pytest

from models.errors import PermissionDeniedError
from services.cancellation import CancellationToken
from services.permissions import (
    SCHEDULE_INTERVIEW,
    SEND_EMAILS,
    VIEW_APPLICATIONS,
    permissions_for_role,
    require,
)


def test_role_permissions():
    assert permissions_for_role("recruiter") >= {VIEW_APPLICATIONS, SCHEDULE_INTERVIEW, SEND_EMAILS}
    assert permissions_for_role("INTERVIEWER") == {VIEW_APPLICATIONS}
    assert permissions_for_role("guest") == frozenset()
    assert permissions_for_role(None) == frozenset()


def test_require_fails_closed():
    require({VIEW_APPLICATIONS}, VIEW_APPLICATIONS)
    with pytest.raises(PermissionDeniedError) as excinfo:
        require(set(), SCHEDULE_INTERVIEW)
    assert excinfo.value.permission == SCHEDULE_INTERVIEW


def test_cancellation_token_commit():
    applied = []
    token = CancellationToken()

    assert token.commit(applied.append, 1) is True
    token.cancel()
    assert token.cancelled
    assert token.commit(applied.append, 2) is False
    assert applied == [1]
