"""Soft cancellation for session-scoped requests."""

from typing import Any, Callable


class CancellationToken:
    """
    Marks a session scope as finished.

    Cancelling does not abort a request that is already in flight; it only
    stops its result from being applied to session state.
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        """Mark the scope as finished."""
        self._cancelled = True

    def commit(self, apply: Callable[..., Any], *args: Any) -> bool:
        """Run ``apply(*args)`` only while the token is live. Returns whether it ran."""
        if self._cancelled:
            return False
        apply(*args)
        return True
