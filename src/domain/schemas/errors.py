"""Conversion of pydantic validation errors into field-level detail."""

from pydantic import ValidationError

from core.exceptions import InvalidDataError


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Map each failing field path to its messages."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.setdefault(path, []).append(error["msg"])
    return errors


def invalid_data(exc: ValidationError) -> InvalidDataError:
    """Build the application error for a failed write validation."""
    return InvalidDataError(field_errors(exc))
