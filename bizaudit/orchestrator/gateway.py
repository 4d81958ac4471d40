"""
Submission Gateway

Records a finalized audit and its scores under an id generated here, before
any AI work starts. The id is issued client-side so the flow never needs to
read its own insert back.

A failed write is not fatal: the flow continues under a local-only id (which
no AI report can be keyed on) and the caller gets a notice to show.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from bizaudit.errors import PersistenceError
from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission

logger = logging.getLogger(__name__)

LOCAL_ID_PREFIX = "local-"

SAVE_FAILED_NOTICE = (
    "We couldn't save your results, but your report is below. "
    "Download or print it to keep a copy."
)


@dataclass(frozen=True)
class SubmissionReceipt:
    audit_id: str
    persisted: bool
    notice: Optional[str] = None
    # False when the id was already on record; the earlier answers stand
    created: bool = True


def new_audit_id() -> str:
    return str(uuid.uuid4())


def is_local_id(audit_id: str) -> bool:
    return audit_id.startswith(LOCAL_ID_PREFIX)


class SubmissionGateway:
    """Durable, idempotent audit recording with a local-id fallback."""

    def __init__(self, store):
        self.store = store

    async def submit(
        self,
        submission: AuditSubmission,
        scores: AuditScores,
        audit_id: Optional[str] = None,
    ) -> SubmissionReceipt:
        audit_id = audit_id or new_audit_id()
        try:
            created = await self.store.record_audit(audit_id, submission, scores)
        except PersistenceError as e:
            local_id = f"{LOCAL_ID_PREFIX}{uuid.uuid4().hex}"
            logger.error(f"[{audit_id}] Submission not saved, continuing as {local_id}: {e.message}")
            return SubmissionReceipt(local_id, persisted=False, notice=SAVE_FAILED_NOTICE)

        if not created:
            logger.info(f"[{audit_id}] Duplicate submission, reusing existing record")
        return SubmissionReceipt(audit_id, persisted=True, created=created)
