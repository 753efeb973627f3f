"""Business errors raised by the application layer.

Exception hierarchy::

    ApplicationError
    ├── ValidationError        malformed input shape
    ├── ConflictError          request the system rejects up front
    │   └── NotificationBatchError
    ├── NotFoundError          missing entity or entity outside the caller's scope
    ├── ForbiddenError         operation not permitted for the entity state
    └── TransientInfraError    store or realtime failure

The HTTP layer maps each class to a status code; nothing below the
interfaces package knows about HTTP.
"""

from __future__ import annotations

from typing import Any


class ApplicationError(Exception):
    """Base class for every business error of the back office."""

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a JSON friendly payload."""

        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ValidationError(ApplicationError):
    default_error_code = "VALIDATION_ERROR"


class ConflictError(ApplicationError):
    default_error_code = "CONFLICT"


class NotFoundError(ApplicationError):
    default_error_code = "NOT_FOUND"


class ForbiddenError(ApplicationError):
    default_error_code = "FORBIDDEN"


class TransientInfraError(ApplicationError):
    default_error_code = "INFRASTRUCTURE_ERROR"


class NotificationBatchError(ConflictError):
    """Some notifications of a multi-recipient send could not be created.

    Notifications created before or after a failing recipient are kept; the
    failures are listed in ``details["failures"]`` keyed by user id.
    """

    default_error_code = "NOTIFICATION_BATCH_FAILED"

    def __init__(self, failures: dict[str, Exception], *, succeeded: int) -> None:
        self.failures = failures
        self.succeeded = succeeded
        super().__init__(
            f"Failed to create {len(failures)} notification(s)",
            details={
                "failures": {user_id: str(exc) for user_id, exc in failures.items()},
                "succeeded": succeeded,
            },
        )


__all__ = [
    "ApplicationError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "ForbiddenError",
    "TransientInfraError",
    "NotificationBatchError",
]
