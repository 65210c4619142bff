"""Typed errors raised by the todo backend."""

from __future__ import annotations


class TodoError(Exception):
    """Base class for errors that map onto an error envelope."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TodoError):
    """Malformed, missing or empty input."""

    status_code = 400


class NotFoundError(TodoError):
    """The referenced todo does not exist."""

    status_code = 404


class ConflictError(TodoError):
    """A todo with the same name already exists."""

    status_code = 409


class StoreError(TodoError):
    """Query, connection or pool failure."""

    status_code = 500


class FatalStartupError(RuntimeError):
    """Raised when the service cannot start serving requests."""


ERRORS_BY_STATUS = {
    ValidationError.status_code: ValidationError,
    NotFoundError.status_code: NotFoundError,
    ConflictError.status_code: ConflictError,
}


def error_for_status(status_code: int, message: str) -> TodoError:
    error_cls = ERRORS_BY_STATUS.get(status_code, StoreError)
    return error_cls(message)
