"""
Repository Layer - Clean Interface for Data Operations

Provides simple functions to store and retrieve audits and reports.
Handles all SQLAlchemy complexity internally; callers only ever see
PersistenceError (write/read failed) or NotFoundError (unknown id).

All functions are synchronous. Async callers run them in a worker thread.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bizaudit.errors import NotFoundError, PersistenceError
from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission

from .models import Audit, AuditReport, EmailStatus, ReportStatus
from .session import get_db_context

logger = logging.getLogger(__name__)


@contextmanager
def _session(action: str):
    """get_db_context with SQLAlchemy errors translated to PersistenceError."""
    try:
        with get_db_context() as db:
            yield db
    except SQLAlchemyError as e:
        logger.error(f"{action} failed: {type(e).__name__}: {e}")
        raise PersistenceError(f"{action} failed") from e


def _is_conflict(error: PersistenceError) -> bool:
    return isinstance(error.__cause__, IntegrityError)


# =============================================================================
# AUDITS
# =============================================================================

def upsert_audit(audit_id: str, submission: AuditSubmission, scores: AuditScores) -> bool:
    """
    Record a finalized audit under its client-issued id.

    Idempotent: a second call with the same id changes nothing (answers are
    immutable once submitted).

    Returns:
        True if a row was created, False if the id was already recorded
    """
    try:
        with _session(f"[{audit_id}] Audit insert") as db:
            if db.get(Audit, audit_id) is not None:
                logger.info(f"[{audit_id}] Audit already recorded, skipping insert")
                return False
            db.add(Audit(
                id=audit_id,
                niche=submission.niche.value,
                sub_niche=submission.sub_niche,
                language=submission.language,
                business_name=submission.business_name,
                contact_name=submission.contact_name,
                contact_email=submission.contact_email,
                contact_phone=submission.contact_phone,
                partner_code=submission.partner_code,
                overall_score=scores.overall,
                scores=scores.to_dict(),
                form_data=submission.to_form_state(),
                report_status=ReportStatus.PENDING,
                email_status=EmailStatus.PENDING,
            ))
    except PersistenceError as e:
        # Concurrent insert of the same id won the race
        if _is_conflict(e) and audit_exists(audit_id):
            return False
        raise

    logger.info(f"[{audit_id}] Audit recorded ({submission.niche.value}, overall {scores.overall})")
    return True


def audit_exists(audit_id: str) -> bool:
    with _session(f"[{audit_id}] Audit lookup") as db:
        return db.get(Audit, audit_id) is not None


def get_audit(audit_id: str) -> Optional[Dict[str, Any]]:
    """Audit row as a dict, or None for an unknown id."""
    with _session(f"[{audit_id}] Audit read") as db:
        audit = db.get(Audit, audit_id)
        return audit.to_dict() if audit else None


def get_audit_with_report(audit_id: str) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Audit row and its AI report (None while pending or after failure).

    Raises:
        NotFoundError: unknown id
        PersistenceError: read failed
    """
    with _session(f"[{audit_id}] Audit read") as db:
        audit = db.get(Audit, audit_id)
        if audit is None:
            raise NotFoundError(audit_id)
        report = db.get(AuditReport, audit_id)
        return audit.to_dict(), (report.report if report else None)


# =============================================================================
# REPORTS
# =============================================================================

def upsert_report(audit_id: str, report: Dict[str, Any], model: Optional[str] = None) -> None:
    """
    Store the AI report for an audit, replacing any earlier one.

    Keyed by audit_id, so a late write from an abandoned attempt simply
    overwrites with an equally valid report.
    """
    def _write():
        with _session(f"[{audit_id}] Report upsert") as db:
            row = db.get(AuditReport, audit_id)
            if row is None:
                db.add(AuditReport(audit_id=audit_id, report=report, model=model))
            else:
                row.report = report
                row.model = model

    try:
        _write()
    except PersistenceError as e:
        if not _is_conflict(e) or not audit_exists(audit_id):
            raise
        # Lost an insert race with another attempt; the row exists now
        _write()

    logger.info(f"[{audit_id}] Report stored")


def get_report(audit_id: str) -> Optional[Dict[str, Any]]:
    with _session(f"[{audit_id}] Report read") as db:
        row = db.get(AuditReport, audit_id)
        return row.report if row else None


# =============================================================================
# STATUS
# =============================================================================

def set_report_status(audit_id: str, status: ReportStatus) -> bool:
    """
    Move report_status out of pending.

    Compare-and-set on pending, so a terminal status is never overwritten and
    two racing writers cannot both win.

    Returns:
        True if this call changed the status

    Raises:
        NotFoundError: unknown id
        PersistenceError: write failed
    """
    if status is ReportStatus.PENDING:
        raise ValueError("report_status cannot move back to pending")

    with _session(f"[{audit_id}] Status update") as db:
        changed = (
            db.query(Audit)
            .filter(Audit.id == audit_id, Audit.report_status == ReportStatus.PENDING)
            .update({Audit.report_status: status}, synchronize_session=False)
        )
        if changed:
            logger.info(f"[{audit_id}] report_status -> {status.value}")
            return True

        audit = db.get(Audit, audit_id)
        if audit is None:
            raise NotFoundError(audit_id)
        if audit.report_status is not status:
            logger.warning(
                f"[{audit_id}] Ignoring report_status {status.value}: "
                f"already {audit.report_status.value}"
            )
        return False


def get_report_status(audit_id: str) -> ReportStatus:
    with _session(f"[{audit_id}] Status read") as db:
        audit = db.get(Audit, audit_id)
        if audit is None:
            raise NotFoundError(audit_id)
        return audit.report_status


def set_email_status(audit_id: str, status: EmailStatus) -> None:
    with _session(f"[{audit_id}] Email status update") as db:
        db.query(Audit).filter(Audit.id == audit_id).update(
            {Audit.email_status: status}, synchronize_session=False,
        )
    logger.info(f"[{audit_id}] email_status -> {status.value}")
