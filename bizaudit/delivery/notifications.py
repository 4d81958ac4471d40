"""
Notification Consumer

Registered as a ReportStore status listener. Reacts only to the transition
to completed, and only once per audit (email_status must still be pending).

The report row is expected to exist when completed fires. If it does not, the
write ordering was broken upstream; that is logged and nothing is sent.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from bizaudit.database import repository
from bizaudit.database.models import EmailStatus, ReportStatus
from bizaudit.errors import AuditError
from bizaudit.models.report import AIReportData
from bizaudit.scoring.subniches import Niche
from bizaudit.utils.config import Settings, get_settings

from .email import EmailDelivery

logger = logging.getLogger(__name__)


def admin_subject(contact: str, vertical: str, score: int) -> str:
    return f"New Audit: {contact} — {vertical} ({score}/100)"


def user_subject(vertical: str, score: int) -> str:
    return f"Your {vertical} Audit Results — {score}/100"


class NotificationConsumer:
    """Admin and user notifications for completed AI reports."""

    def __init__(self, delivery: Optional[EmailDelivery] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.delivery = delivery or EmailDelivery()

    async def __call__(self, audit_id: str, status: ReportStatus) -> None:
        if status is not ReportStatus.COMPLETED:
            return

        audit, raw_report = await asyncio.to_thread(repository.get_audit_with_report, audit_id)

        if audit.get("email_status") != EmailStatus.PENDING.value:
            logger.info(f"[{audit_id}] Notifications already handled ({audit.get('email_status')})")
            return
        if raw_report is None:
            logger.error(f"[{audit_id}] Ordering violation: status is completed but no report row exists")
            return

        report = AIReportData.from_dict(raw_report)
        niche = Niche.parse(audit.get("niche"))
        vertical = niche.label if niche else "Business"
        score = audit.get("overall_score") or 0
        report_url = f"{self.settings.REPORT_BASE_URL.rstrip('/')}/{audit_id}"

        if self.settings.ADMIN_EMAIL:
            await self.delivery.send(
                [self.settings.ADMIN_EMAIL],
                admin_subject(audit.get("contact_name") or "Unknown", vertical, score),
                self._admin_text(audit, report, report_url),
            )

        result = await self.delivery.send(
            [audit["contact_email"]],
            user_subject(vertical, score),
            self._user_text(audit, report, report_url),
        )

        await self._record(audit_id, EmailStatus.SENT if result.success else EmailStatus.FAILED)

    async def _record(self, audit_id: str, status: EmailStatus) -> None:
        try:
            await asyncio.to_thread(repository.set_email_status, audit_id, status)
        except AuditError as e:
            logger.warning(f"[{audit_id}] Could not record email_status {status.value}: {e.message}")

    def _admin_text(self, audit: Dict[str, Any], report: AIReportData, report_url: str) -> str:
        lines = [
            f"Business: {audit.get('business_name')}",
            f"Contact: {audit.get('contact_name')} <{audit.get('contact_email')}>",
            f"Phone: {audit.get('contact_phone') or '-'}",
            f"Sub-niche: {audit.get('sub_niche') or '-'}",
            f"Partner code: {audit.get('partner_code') or '-'}",
            f"Overall score: {audit.get('overall_score')}/100",
            "",
            "Top gaps:",
        ]
        lines.extend(f"  - [{gap.priority}] {gap.title}" for gap in report.gaps)
        lines.extend(["", f"Report: {report_url}"])
        return "\n".join(lines)

    def _user_text(self, audit: Dict[str, Any], report: AIReportData, report_url: str) -> str:
        return "\n".join([
            f"Hi {audit.get('contact_name') or 'there'},",
            "",
            report.executive_summary,
            "",
            f"Your full report: {report_url}",
        ])
