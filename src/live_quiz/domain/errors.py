"""Error types raised by the session and quiz services."""


class LiveQuizError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LiveQuizError):
    """Missing or malformed request fields."""

    status_code = 400


class NotFoundError(LiveQuizError):
    """Unknown session or quiz id."""

    status_code = 404


class InvalidStateError(LiveQuizError):
    """Operation not permitted in the current lifecycle state."""

    status_code = 400


class ConflictError(LiveQuizError):
    """Operation collides with existing state, e.g. a quiz already running."""

    status_code = 409


class DependencyError(LiveQuizError):
    """Downstream collaborator failed."""

    status_code = 500
