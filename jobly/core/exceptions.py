"""Domain exceptions raised by the data-access layer.

Each class carries the HTTP status the API boundary maps it to.
"""


class JoblyError(Exception):
    """Base exception for all Jobly errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JoblyError):
    """Raised when input cannot be turned into a valid query (e.g. empty update)."""

    status_code = 400


class NotFoundError(JoblyError):
    """Raised when a primary-key lookup matches no row."""

    status_code = 404


class ConflictError(JoblyError):
    """Raised when a create would duplicate a unique key."""

    status_code = 409


class UnauthorizedError(JoblyError):
    """Raised when login credentials do not match."""

    status_code = 401
