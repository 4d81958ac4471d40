"""
Report View Resolution

Which report a reader sees: an in-memory AI result, else a persisted AI
report, else the template report.
"""

from typing import Optional

from bizaudit.models.report import AIReportData
from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission

from .template import generate_template_report


def _usable(report: Optional[AIReportData]) -> bool:
    return report is not None and not report.is_empty


def resolve_report(
    scores: AuditScores,
    submission: AuditSubmission,
    in_memory: Optional[AIReportData] = None,
    persisted: Optional[AIReportData] = None,
) -> AIReportData:
    """Never returns an empty report."""
    if _usable(in_memory):
        return in_memory
    if _usable(persisted):
        return persisted
    return generate_template_report(scores, submission)
