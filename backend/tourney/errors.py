"""
Engine error taxonomy.

Services raise these; the HTTP layer maps them to status codes through a
single exception handler (see tourney.main). Every error carries a
machine-readable code next to the human-readable message.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for all engine failures"""

    status_code = 500
    default_code = "ENGINE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def to_dict(self):
        return {"detail": self.message, "code": self.code}


class NotFound(EngineError):
    """A referenced entity does not exist"""

    status_code = 404
    default_code = "NOT_FOUND"


class PreconditionFailed(EngineError):
    """Entity state does not allow the operation (too few teams, unset participants)"""

    status_code = 400
    default_code = "PRECONDITION_FAILED"


class Conflict(EngineError):
    """Operation already happened (schedule generated, match ended)"""

    status_code = 409
    default_code = "CONFLICT"


class InvalidArgument(EngineError):
    """Caller supplied a value that can never be valid here"""

    status_code = 400
    default_code = "INVALID_ARGUMENT"


class Internal(EngineError):
    """Storage failure"""

    status_code = 500
    default_code = "INTERNAL_ERROR"
