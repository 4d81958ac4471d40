"""
Report Store

Async facade over the repository. Every write runs in a worker thread so the
event loop stays free while SQLAlchemy blocks.

Listeners registered with add_listener() are called after a report_status
transition has committed. mark_completed() is only ever called after
save_report() returned, so a listener reacting to "completed" can rely on the
report row already existing.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from bizaudit.database import repository
from bizaudit.database.models import ReportStatus
from bizaudit.models.report import AIReportData, SOURCE_AI
from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission

logger = logging.getLogger(__name__)

StatusListener = Callable[[str, ReportStatus], Awaitable[None]]


@dataclass
class ReportRecord:
    """What the read path returns for one audit."""
    audit: Dict[str, Any]
    ai_report: Optional[AIReportData]
    report_status: str

    @property
    def is_terminal(self) -> bool:
        return self.report_status != ReportStatus.PENDING.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "audit": self.audit,
            "aiReport": self.ai_report.to_dict() if self.ai_report else None,
            "reportStatus": self.report_status,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReportRecord":
        raw_report = data.get("aiReport")
        return cls(
            audit=dict(data.get("audit") or {}),
            ai_report=AIReportData.from_dict(raw_report, source=SOURCE_AI) if raw_report else None,
            report_status=str(data.get("reportStatus") or ReportStatus.PENDING.value),
        )


class ReportStore:
    """Audit, report and status persistence for the async report flow."""

    def __init__(self):
        self._listeners: List[StatusListener] = []

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    async def record_audit(self, audit_id: str, submission: AuditSubmission, scores: AuditScores) -> bool:
        return await asyncio.to_thread(repository.upsert_audit, audit_id, submission, scores)

    async def save_report(self, audit_id: str, report: AIReportData, model: Optional[str] = None) -> None:
        await asyncio.to_thread(repository.upsert_report, audit_id, report.to_dict(), model)

    async def mark_completed(self, audit_id: str) -> bool:
        return await self._transition(audit_id, ReportStatus.COMPLETED)

    async def mark_failed(self, audit_id: str) -> bool:
        return await self._transition(audit_id, ReportStatus.FAILED)

    async def fetch(self, audit_id: str) -> ReportRecord:
        """
        Raises:
            NotFoundError: unknown id
            PersistenceError: read failed
        """
        audit, report = await asyncio.to_thread(repository.get_audit_with_report, audit_id)
        return ReportRecord(
            audit=audit,
            ai_report=AIReportData.from_dict(report, source=SOURCE_AI) if report else None,
            report_status=audit["report_status"],
        )

    async def _transition(self, audit_id: str, status: ReportStatus) -> bool:
        changed = await asyncio.to_thread(repository.set_report_status, audit_id, status)
        if changed:
            await self._notify(audit_id, status)
        return changed

    async def _notify(self, audit_id: str, status: ReportStatus) -> None:
        for listener in self._listeners:
            try:
                await listener(audit_id, status)
            except Exception as e:
                # A listener failure must not undo a committed transition
                logger.error(
                    f"[{audit_id}] Status listener {getattr(listener, '__qualname__', listener)} "
                    f"failed: {type(e).__name__}: {e}"
                )
