"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the profile tracker."""

    # Not found errors
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    STATUS_NOT_FOUND = "STATUS_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors
    STATUS_IN_USE = "STATUS_IN_USE"

    # Pagination
    CURSOR_EXPIRED = "CURSOR_EXPIRED"

    # Store errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(self.message)


class InvalidDataError(AppException):
    """Record failed schema validation.

    ``field_errors`` maps a dotted field path to the messages for that field.
    """

    def __init__(
        self,
        field_errors: dict[str, list[str]],
        message: str = "Invalid data",
    ) -> None:
        self.field_errors = field_errors
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details=field_errors,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {profile_id}",
            details={"profile_id": profile_id},
        )


class StatusNotFoundError(AppException):
    """Profile status not found."""

    def __init__(self, status_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.STATUS_NOT_FOUND,
            message=f"Status not found: {status_id}",
            details={"status_id": status_id},
        )


class StatusInUseError(AppException):
    """Status is still referenced by at least one profile."""

    def __init__(self, status_id: str, profile_id: str | None = None) -> None:
        details: dict[str, str] = {"status_id": status_id}
        if profile_id:
            details["profile_id"] = profile_id
        super().__init__(
            error_code=ErrorCode.STATUS_IN_USE,
            message="Status is in use by one or more profiles and cannot be deleted",
            details=details,
        )


class CursorExpiredError(AppException):
    """The document a continuation token points at no longer exists."""

    def __init__(self, cursor: str) -> None:
        super().__init__(
            error_code=ErrorCode.CURSOR_EXPIRED,
            message="Pagination cursor is no longer valid",
            details={"cursor": cursor},
        )


class StoreUnavailableError(AppException):
    """The backing store could not be reached or rejected the operation."""

    def __init__(self, message: str = "Store unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message=message,
        )
