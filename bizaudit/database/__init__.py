"""
BizAudit Database Layer

Two tables (audits, audit_reports) behind a small repository.

Usage:
    from bizaudit.database import init_db, upsert_audit, set_report_status, ReportStatus

    init_db()
    upsert_audit(audit_id, submission, scores)
    set_report_status(audit_id, ReportStatus.COMPLETED)
"""

from .models import Base, Audit, AuditReport, ReportStatus, EmailStatus
from .session import (
    get_database_url,
    get_engine,
    get_session_factory,
    get_db,
    get_db_context,
    init_db,
    check_db_connection,
    reset_engine,
)
from .repository import (
    upsert_audit,
    audit_exists,
    get_audit,
    get_audit_with_report,
    upsert_report,
    get_report,
    set_report_status,
    get_report_status,
    set_email_status,
)

__all__ = [
    # Models
    "Base",
    "Audit",
    "AuditReport",
    "ReportStatus",
    "EmailStatus",

    # Session
    "get_database_url",
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_db_context",
    "init_db",
    "check_db_connection",
    "reset_engine",

    # Repository
    "upsert_audit",
    "audit_exists",
    "get_audit",
    "get_audit_with_report",
    "upsert_report",
    "get_report",
    "set_report_status",
    "get_report_status",
    "set_email_status",
]
