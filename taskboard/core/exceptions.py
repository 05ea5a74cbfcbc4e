"""Domain errors and API exceptions.

Services raise the domain errors below; ``taskboard.main`` maps them onto the
standard error envelope. Denied access and missing records are *not*
exceptions: services return ``None``/``False``/empty results for those.
"""

from typing import Any

from fastapi import HTTPException, status


class TaskboardError(Exception):
    """Base class for domain errors raised by the core services."""


class ValidationError(TaskboardError):
    """Input failed validation before any persistence attempt.

    Carries the offending field so the caller can map it to field-level
    feedback.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class TaskValidationError(ValidationError):
    """A task field failed validation."""


class ProfileValidationError(ValidationError):
    """A profile field failed validation."""


class InvalidCredentialError(TaskboardError):
    """Bearer credential is missing, malformed, expired, or unverifiable."""


class InvariantViolationError(TaskboardError):
    """Caller misused the API in a way that must abort the unit of work."""


class SelfLockoutError(InvariantViolationError):
    """Attempt to delete or alter the caller's own permission record."""

    def __init__(
        self, user_id: int, permission_id: int | None = None, action: str = "remove"
    ) -> None:
        super().__init__(f"Cannot {action} your own permission")
        self.user_id = user_id
        self.permission_id = permission_id


class APIException(HTTPException):
    """Custom exception for API errors with standard format.

    Example:
        raise APIException(
            code="TASK_NOT_FOUND",
            message="Task not found",
            status_code=status.HTTP_404_NOT_FOUND
        )
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API exception.

        Args:
            code: Error code (e.g., 'AUTH_INVALID_TOKEN', 'TASK_NOT_FOUND').
            message: Human-readable error message.
            status_code: HTTP status code (default: 400).
            details: Optional additional error details.
        """
        super().__init__(
            status_code=status_code,
            detail={"error": {"code": code, "message": message, "details": details}},
        )
        self.code = code
        self.message = message
        self.details = details


def raise_not_found(resource: str, resource_id: int | str | None = None) -> None:
    """Raise 404 Not Found exception.

    Args:
        resource: Resource type (e.g., 'Task', 'User').
        resource_id: Optional resource ID.

    Raises:
        APIException: 404 Not Found error.
    """
    message = f"{resource} not found"
    if resource_id is not None:
        message += f" (ID: {resource_id})"
    raise APIException(
        code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
        message=message,
        status_code=status.HTTP_404_NOT_FOUND,
    )


def raise_forbidden(
    code: str = "AUTH_INSUFFICIENT_PERMISSIONS",
    message: str = "Insufficient permissions",
    details: dict[str, Any] | None = None,
) -> None:
    """Raise 403 Forbidden exception.

    Args:
        code: Error code (default: 'AUTH_INSUFFICIENT_PERMISSIONS').
        message: Error message (default: 'Insufficient permissions').
        details: Optional error details.

    Raises:
        APIException: 403 Forbidden error.
    """
    raise APIException(
        code=code,
        message=message,
        status_code=status.HTTP_403_FORBIDDEN,
        details=details,
    )

