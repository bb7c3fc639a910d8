from typing import Dict, Optional


class PortalException(Exception):
    """Base class for all barangay portal client exceptions."""

    def __init__(self, message: str = "An error occurred", error_code: str = "error"):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ApiError(PortalException):
    """The backend answered with a non-2xx status."""
    def __init__(self, message: str = "Request failed", status_code: Optional[int] = None):
        super().__init__(message=message, error_code="api_error")
        self.status_code = status_code


class NetworkError(PortalException):
    """The request never reached the backend."""
    def __init__(self, message: str = "Network error"):
        super().__init__(message=message, error_code="network_error")


class UnAuthenticated(PortalException):
    """No user is signed in."""
    def __init__(self, message: str = "You are not authenticated. Please login to continue"):
        super().__init__(message=message, error_code="unauthenticated")


class InsufficientPermission(PortalException):
    """User does not have the necessary role to perform an action."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message=message, error_code="insufficient_permissions")


class DataValidationError(PortalException):
    """Submitted form data failed validation checks."""
    def __init__(self, errors: Dict[str, str], message: str = "Please fix the errors in the form"):
        super().__init__(message=message, error_code="data_validation_error")
        self.errors = dict(errors)


class InvalidStatusTransition(PortalException):
    """The requested status change is not an edge of the workflow."""
    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot change status from '{current}' to '{target}'",
            error_code="invalid_status_transition",
        )
        self.current = current
        self.target = target


class AttachmentLimitExceeded(PortalException):
    def __init__(self, limit: int):
        super().__init__(message=f"Maximum {limit} attachments allowed", error_code="attachment_limit")
        self.limit = limit


def describe_error(exc: BaseException, fallback: str) -> str:
    """Human readable text for a toast, falling back when the error has none."""
    message = getattr(exc, "message", None)
    return message or fallback
