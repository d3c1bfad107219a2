"""Typed errors raised by the core.

Repositories and the auth layer raise these; the HTTP layer maps each
class to a status code (see ``todoapp.main``). The message is what the
client sees, so only ``InternalError`` ever carries driver text.
"""


class TodoAppError(Exception):
    """Base class for every error the API knows how to answer."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(TodoAppError):
    status_code = 400


class UnauthorizedError(TodoAppError):
    status_code = 401


class NotFoundError(TodoAppError):
    """Entity absent or not owned by the caller. The two are not distinguished."""

    status_code = 404


class ConflictError(TodoAppError):
    status_code = 409


class InternalError(TodoAppError):
    status_code = 500
