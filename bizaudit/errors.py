"""
Error Taxonomy

Every failure the report flow can surface to a caller. The scoring path
never raises (lookups default), so these only come from validation,
quota checks, the AI provider, persistence, and the read path.
"""

from typing import Any, Dict, List, Optional


class AuditError(Exception):
    """Base class for report-flow errors."""

    code = "audit_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class ValidationError(AuditError):
    """Malformed or missing required answers, rejected before scoring."""

    code = "validation_error"

    def __init__(self, errors: List[Dict[str, str]]):
        fields = ", ".join(e["field"] for e in errors)
        super().__init__(f"Invalid submission: {fields}")
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class RateLimitExceeded(AuditError):
    """
    Quota exhausted for the current attempt.

    Carries only the rounded-up hours until the later reset; which counter
    tripped is deliberately not recorded here.
    """

    code = "rate_limited"

    def __init__(self, hours_remaining: int, message: Optional[str] = None):
        self.hours_remaining = hours_remaining
        super().__init__(message or f"You've reached the daily audit limit. Try again {time_hint(hours_remaining)}.")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rateLimited": True,
            "code": self.code,
            "hoursRemaining": self.hours_remaining,
            "message": self.message,
        }


class TransientProviderError(AuditError):
    """
    AI output could not be used (truncated, unparseable, provider unavailable).

    Recoverable: the caller offers Retry or Skip-to-template.
    """

    code = "provider_error"

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        message = f"AI report unavailable ({reason})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "retryable": True,
            "error": self.code,
            "reason": self.reason,
            "message": self.message,
        }


class ProviderError(AuditError):
    """AI provider rejected the request outright (auth, bad request). Not retryable."""

    code = "provider_failed"


class PersistenceError(AuditError):
    """Submission, report, or status write failed."""

    code = "persistence_error"


class NotFoundError(AuditError):
    """Unknown audit id on read. Distinct from a pending report."""

    code = "not_found"

    def __init__(self, audit_id: str):
        super().__init__(f"Audit {audit_id} not found")
        self.audit_id = audit_id

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code}


class ReportFetchError(AuditError):
    """Generic transport failure while reading a report."""

    code = "fetch_failed"


def time_hint(hours_remaining: int) -> str:
    """Human wait hint for a rate-limit rejection."""
    if hours_remaining <= 1:
        return "in about 1 hour"
    if hours_remaining < 20:
        return f"in about {hours_remaining} hours"
    return "tomorrow"
