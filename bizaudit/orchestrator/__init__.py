"""
Report Orchestration

Submit -> rate check -> AI call (retry/skip) -> persist -> status flip, as an
explicit state machine per submission.
"""

from .gateway import (
    LOCAL_ID_PREFIX,
    SAVE_FAILED_NOTICE,
    SubmissionGateway,
    SubmissionReceipt,
    is_local_id,
    new_audit_id,
)
from .generator import Attempt, ReportGenerator
from .orchestrator import AI_UNAVAILABLE_NOTICE, ReportOrchestrator
from .state import GenerationState, InvalidTransition, ReportSession, TRANSITIONS

__all__ = [
    "LOCAL_ID_PREFIX",
    "SAVE_FAILED_NOTICE",
    "SubmissionGateway",
    "SubmissionReceipt",
    "is_local_id",
    "new_audit_id",
    "Attempt",
    "ReportGenerator",
    "AI_UNAVAILABLE_NOTICE",
    "ReportOrchestrator",
    "GenerationState",
    "InvalidTransition",
    "ReportSession",
    "TRANSITIONS",
]
