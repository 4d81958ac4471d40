"""
BizAudit - Data Models

Shared data models used across the system.
"""

from .submission import (
    AuditSubmission,
    PII_FIELDS,
    STEPS,
    VALID_LANGUAGES,
    validate_form_state,
)
from .scores import CATEGORY_IDS, AuditScores, CategoryScore
from .report import (
    PRIORITIES,
    SOURCE_AI,
    SOURCE_TEMPLATE,
    AIReportData,
    ReportItem,
)

__all__ = [
    "AuditSubmission",
    "PII_FIELDS",
    "STEPS",
    "VALID_LANGUAGES",
    "validate_form_state",
    "CATEGORY_IDS",
    "AuditScores",
    "CategoryScore",
    "PRIORITIES",
    "SOURCE_AI",
    "SOURCE_TEMPLATE",
    "AIReportData",
    "ReportItem",
]
