# backend/repositories/errors.py
from pydantic import ValidationError as PydanticValidationError


class PlaylistAPIError(Exception):
    """Base error raised by the stores; carries the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PlaylistAPIError):
    status_code = 404


class ValidationError(PlaylistAPIError):
    status_code = 400


class ConflictError(PlaylistAPIError):
    # Duplicate track-in-playlist answers 400, like the rest of the bad input.
    status_code = 400


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Human readable one-liner for the first pydantic error."""
    errors = exc.errors()
    if not errors:
        return "Invalid input."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def validation_error_from(exc: PydanticValidationError) -> ValidationError:
    return ValidationError(describe_validation_error(exc))
