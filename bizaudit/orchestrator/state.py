"""
Report Generation State

One ReportSession per submission holds the single source of truth for where
the report flow is. Every state change goes through ReportSession.advance(),
which rejects transitions that are not in the table below.

    IDLE -> SUBMITTING -> AWAITING_AI -> COMPLETED
                       |             -> FAILED
                       |             -> RATE_LIMITED
                       |             -> PROVIDER_ERROR -> AWAITING_AI (retry)
                       |                               -> FALLBACK    (skip)
                       -> FALLBACK (no id to key an AI report on, or no AI client)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from bizaudit.errors import AuditError, RateLimitExceeded, TransientProviderError
from bizaudit.models.report import AIReportData
from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission
from bizaudit.reporter.view import resolve_report


class GenerationState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_AI = "awaiting_ai"
    PROVIDER_ERROR = "provider_error"
    RATE_LIMITED = "rate_limited"
    COMPLETED = "completed"
    FAILED = "failed"
    FALLBACK = "fallback"

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]


TRANSITIONS: Mapping[GenerationState, FrozenSet[GenerationState]] = {
    GenerationState.IDLE: frozenset({GenerationState.SUBMITTING}),
    GenerationState.SUBMITTING: frozenset({
        GenerationState.AWAITING_AI,
        GenerationState.FALLBACK,
    }),
    GenerationState.AWAITING_AI: frozenset({
        GenerationState.COMPLETED,
        GenerationState.FAILED,
        GenerationState.RATE_LIMITED,
        GenerationState.PROVIDER_ERROR,
        GenerationState.FALLBACK,
    }),
    GenerationState.PROVIDER_ERROR: frozenset({
        GenerationState.AWAITING_AI,
        GenerationState.FALLBACK,
    }),
    GenerationState.RATE_LIMITED: frozenset(),
    GenerationState.COMPLETED: frozenset(),
    GenerationState.FAILED: frozenset(),
    GenerationState.FALLBACK: frozenset(),
}


class InvalidTransition(AuditError):
    """A user action or result arrived in a state that does not accept it."""

    code = "invalid_transition"

    def __init__(self, current: GenerationState, target: GenerationState):
        super().__init__(f"Cannot move from {current.value} to {target.value}")
        self.current = current
        self.target = target


@dataclass
class ReportSession:
    """In-memory orchestration state for one submission."""
    submission: AuditSubmission
    scores: AuditScores
    state: GenerationState = GenerationState.IDLE
    audit_id: Optional[str] = None
    persisted: bool = False
    notice: Optional[str] = None
    attempts: int = 0
    ai_report: Optional[AIReportData] = None
    rate_limit: Optional[RateLimitExceeded] = None
    provider_error: Optional[TransientProviderError] = None
    error: Optional[str] = None
    history: list = field(default_factory=list)
    # Orchestrator clock reading at the last state change
    updated_at: float = 0.0

    def can_advance(self, target: GenerationState) -> bool:
        return target in TRANSITIONS[self.state]

    def advance(self, target: GenerationState) -> None:
        if not self.can_advance(target):
            raise InvalidTransition(self.state, target)
        self.history.append(self.state)
        self.state = target

    def report(self, persisted: Optional[AIReportData] = None) -> AIReportData:
        """The report a reader sees right now; never empty."""
        return resolve_report(self.scores, self.submission, in_memory=self.ai_report, persisted=persisted)

    def to_dict(self) -> Dict[str, Any]:
        report = self.report()
        return {
            "auditId": self.audit_id,
            "state": self.state.value,
            "persisted": self.persisted,
            "notice": self.notice,
            "attempts": self.attempts,
            "canRetry": self.state is GenerationState.PROVIDER_ERROR,
            "rateLimit": self.rate_limit.to_dict() if self.rate_limit else None,
            "providerError": self.provider_error.to_dict() if self.provider_error else None,
            "error": self.error,
            "scores": self.scores.to_dict(),
            "reportSource": report.source,
            "report": report.to_dict(),
        }
