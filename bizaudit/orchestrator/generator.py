"""
AI Report Generator

One attempt at an AI report:
1. rate check and prompt build, concurrently
2. completion call
3. parse (truncated or unparseable output is a recoverable error)
4. persist the report, then flip report_status to completed

Step 4 order matters: the notification consumer reacts to the completed
transition and reads the report row, so the row must exist first.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from bizaudit.analyzer.parser import parse_report
from bizaudit.analyzer.prompts import build_prompt
from bizaudit.models.report import AIReportData
from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission

logger = logging.getLogger(__name__)


@dataclass
class Attempt:
    """One generation attempt. `token` identifies it within its session."""
    token: int
    origin: str
    report: Optional[AIReportData] = None
    saved: bool = False


class ReportGenerator:
    """Rate-checked, persisted AI report generation."""

    def __init__(self, client, limiter, store):
        self.client = client
        self.limiter = limiter
        self.store = store

    async def run(
        self,
        audit_id: str,
        submission: AuditSubmission,
        scores: AuditScores,
        attempt: Attempt,
    ) -> AIReportData:
        """
        Raises:
            RateLimitExceeded: quota exhausted, nothing was billed
            TransientProviderError: provider unavailable, or output truncated,
                unparseable or empty
            ProviderError: provider rejected the request
            PersistenceError: report or status write failed (attempt.report
                is set when the report itself was produced)
        """
        logger.info(f"[{audit_id}] AI attempt {attempt.token} started")

        _, prompt = await asyncio.gather(
            self.limiter.check(submission.contact_email, attempt.origin),
            asyncio.to_thread(build_prompt, submission, scores),
        )

        response = await self.client.complete(prompt.user, system=prompt.system)
        report = parse_report(response.content, response.stop_reason)
        attempt.report = report

        await self.store.save_report(audit_id, report, model=response.model)
        attempt.saved = True
        await self.store.mark_completed(audit_id)

        logger.info(
            f"[{audit_id}] AI attempt {attempt.token} completed: {len(report.gaps)} gaps, "
            f"{len(report.quick_wins)} quick wins, "
            f"{len(report.strategic_recommendations)} recommendations"
        )
        return report
