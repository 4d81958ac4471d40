"""
SQLAlchemy Models for BizAudit

Two tables:
1. audits - one row per finalized questionnaire, keyed by the client-issued id
2. audit_reports - at most one AI report per audit, keyed by audit_id

report_status moves pending -> completed or pending -> failed, never back.
The notification consumer reacts to the completed transition and reads
audit_reports, so a report row is always written before that flip.
"""

import enum
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import (
    Column, String, Integer, DateTime, ForeignKey, Enum, Index, JSON,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in development and tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


# =============================================================================
# ENUMS
# =============================================================================

class ReportStatus(enum.Enum):
    """AI report lifecycle for one audit"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not ReportStatus.PENDING


class EmailStatus(enum.Enum):
    """Notification delivery for one audit"""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


# =============================================================================
# TABLES
# =============================================================================

class Audit(Base):
    """A finalized questionnaire with its computed scores"""
    __tablename__ = "audits"

    id = Column(String(64), primary_key=True)

    # Vertical
    niche = Column(String(32), nullable=False)
    sub_niche = Column(String(64))
    language = Column(String(8), default="en")

    # Business and contact (contact fields never go to the AI provider)
    business_name = Column(String(255), nullable=False)
    contact_name = Column(String(255))
    contact_email = Column(String(255), nullable=False)
    contact_phone = Column(String(64))
    partner_code = Column(String(64))

    # Scores and raw answers
    overall_score = Column(Integer, nullable=False)
    scores = Column(JSONType, nullable=False)
    form_data = Column(JSONType, nullable=False)

    # Status
    report_status = Column(
        Enum(ReportStatus, name="reportstatus", values_callable=_enum_values),
        default=ReportStatus.PENDING,
        nullable=False,
    )
    email_status = Column(
        Enum(EmailStatus, name="emailstatus", values_callable=_enum_values),
        default=EmailStatus.PENDING,
        nullable=False,
    )

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    report = relationship("AuditReport", back_populates="audit", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_audits_contact_email", "contact_email"),
        Index("idx_audits_created_at", "created_at"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "niche": self.niche,
            "sub_niche": self.sub_niche,
            "language": self.language,
            "business_name": self.business_name,
            "contact_name": self.contact_name,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
            "partner_code": self.partner_code,
            "overall_score": self.overall_score,
            "scores": self.scores,
            "form_data": self.form_data,
            "report_status": self.report_status.value if self.report_status else None,
            "email_status": self.email_status.value if self.email_status else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class AuditReport(Base):
    """Structured AI report for one audit"""
    __tablename__ = "audit_reports"

    audit_id = Column(String(64), ForeignKey("audits.id", ondelete="CASCADE"), primary_key=True)
    report = Column(JSONType, nullable=False)
    model = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    audit = relationship("Audit", back_populates="report")
