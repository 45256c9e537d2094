"""Error taxonomy surfaced by the continuity engine.

Every rejected operation raises one of these with a message an author can act
on. ``app.py`` maps them to HTTP responses; the engine never swallows them.
"""

from __future__ import annotations

from typing import Any, List, Optional


class EngineError(Exception):
    """Base class for errors the engine surfaces to its caller."""

    code: str = "engine_error"
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "retryable": self.retryable}


class ValidationError(EngineError):
    """A required field is missing or a value is malformed. Raised before the checker runs."""

    code = "validation_error"
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class ContinuityViolation(EngineError):
    """A hard continuity rule failed; nothing was persisted."""

    code = "continuity_violation"
    status_code = 409

    def __init__(self, message: str, violations: List[Any]):
        super().__init__(message)
        self.violations = list(violations)

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["violations"] = [v.to_dict() for v in self.violations]
        return body


class AuthenticationRequired(EngineError):
    """The request did not say which author is acting."""

    code = "authentication_required"
    status_code = 401


class NotFound(EngineError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(f"{entity_type} '{entity_id}' not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictRetryable(EngineError):
    """Timeout or transient store failure. The whole operation is safe to retry."""

    code = "conflict_retryable"
    status_code = 503
    retryable = True
