"""Error taxonomy for the recruiting portal."""

from typing import Optional


class PortalError(Exception):
    """Base class for all portal errors."""


class ValidationError(PortalError, ValueError):
    """Raised when parameters or input data are invalid."""


class ScheduleIndexError(PortalError, IndexError):
    """Raised when an edit references a day or slot that does not exist."""


class PermissionDeniedError(PortalError, PermissionError):
    """Raised when a required permission is not granted."""

    def __init__(self, permission: str):
        super().__init__(f"Missing permission: {permission}")
        self.permission = permission


class NetworkError(PortalError):
    """Raised when a call to the portal API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DispatchError(PortalError):
    """Raised when sending emails fails. Wraps the original exception."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class CapacityError(PortalError):
    """
    More candidates than available slots.

    Reported alongside a partial schedule rather than raised.
    """

    def __init__(self, unplaced: list[str]):
        super().__init__(
            f"{len(unplaced)} candidate(s) could not be placed: {', '.join(unplaced)}"
        )
        self.unplaced = list(unplaced)
