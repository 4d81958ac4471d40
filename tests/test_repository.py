"""
Tests for the persistence layer: repository, ReportStore and the
submission gateway.

Repository tests run against a throwaway SQLite database.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bizaudit.database import (
    EmailStatus,
    ReportStatus,
    get_audit,
    get_audit_with_report,
    get_report,
    get_report_status,
    set_email_status,
    set_report_status,
    upsert_audit,
    upsert_report,
)
from bizaudit.errors import NotFoundError, PersistenceError
from bizaudit.models import AIReportData
from bizaudit.orchestrator import SAVE_FAILED_NOTICE, SubmissionGateway, is_local_id
from bizaudit.persistence import ReportRecord, ReportStore

AUDIT_ID = "3f2b9c1e-0000-4000-8000-000000000001"


@pytest.mark.integration
class TestAuditRepository:

    def test_insert_then_read(self, sqlite_db, hs_submission, hs_scores):
        assert upsert_audit(AUDIT_ID, hs_submission, hs_scores) is True

        audit = get_audit(AUDIT_ID)
        assert audit["business_name"] == "Summit Heating & Air"
        assert audit["contact_email"] == "Dana@SummitHVAC.com"
        assert audit["overall_score"] == 66
        assert audit["scores"]["followUp"] == 39
        assert audit["form_data"]["step3"]["responseSpeed"] == "Under 5 minutes"
        assert audit["report_status"] == "pending"
        assert audit["email_status"] == "pending"

    def test_insert_is_idempotent(self, sqlite_db, hs_submission, hs_scores, re_submission, re_scores):
        upsert_audit(AUDIT_ID, hs_submission, hs_scores)
        assert upsert_audit(AUDIT_ID, re_submission, re_scores) is False
        # Answers are immutable once submitted
        assert get_audit(AUDIT_ID)["niche"] == "home_services"

    def test_unknown_id(self, sqlite_db):
        assert get_audit("missing") is None
        with pytest.raises(NotFoundError):
            get_audit_with_report("missing")


@pytest.mark.integration
class TestReportRepository:

    def test_report_absent_until_written(self, sqlite_db, hs_submission, hs_scores):
        upsert_audit(AUDIT_ID, hs_submission, hs_scores)
        audit, report = get_audit_with_report(AUDIT_ID)
        assert audit["id"] == AUDIT_ID
        assert report is None

    def test_upsert_replaces(self, sqlite_db, hs_submission, hs_scores, ai_report_payload):
        upsert_audit(AUDIT_ID, hs_submission, hs_scores)
        upsert_report(AUDIT_ID, {"executiveSummary": "first"}, model="m1")
        upsert_report(AUDIT_ID, ai_report_payload, model="m2")
        assert get_report(AUDIT_ID) == ai_report_payload

    def test_report_for_unknown_audit(self, sqlite_db, ai_report_payload):
        with pytest.raises(PersistenceError):
            upsert_report("missing", ai_report_payload)


@pytest.mark.integration
class TestReportStatus:
    """pending -> completed | failed, and never back."""

    def test_first_terminal_status_wins(self, sqlite_db, hs_submission, hs_scores):
        upsert_audit(AUDIT_ID, hs_submission, hs_scores)
        assert set_report_status(AUDIT_ID, ReportStatus.COMPLETED) is True
        assert set_report_status(AUDIT_ID, ReportStatus.FAILED) is False
        assert get_report_status(AUDIT_ID) is ReportStatus.COMPLETED

    def test_repeat_is_a_no_op(self, sqlite_db, hs_submission, hs_scores):
        upsert_audit(AUDIT_ID, hs_submission, hs_scores)
        set_report_status(AUDIT_ID, ReportStatus.FAILED)
        assert set_report_status(AUDIT_ID, ReportStatus.FAILED) is False

    def test_cannot_return_to_pending(self, sqlite_db, hs_submission, hs_scores):
        upsert_audit(AUDIT_ID, hs_submission, hs_scores)
        with pytest.raises(ValueError):
            set_report_status(AUDIT_ID, ReportStatus.PENDING)

    def test_unknown_id(self, sqlite_db):
        with pytest.raises(NotFoundError):
            set_report_status("missing", ReportStatus.COMPLETED)

    def test_email_status(self, sqlite_db, hs_submission, hs_scores):
        upsert_audit(AUDIT_ID, hs_submission, hs_scores)
        set_email_status(AUDIT_ID, EmailStatus.SENT)
        assert get_audit(AUDIT_ID)["email_status"] == "sent"


@pytest.mark.integration
class TestReportStore:

    @pytest.fixture
    def store(self, sqlite_db):
        return ReportStore()

    @pytest.mark.asyncio
    async def test_fetch_pending(self, store, hs_submission, hs_scores):
        await store.record_audit(AUDIT_ID, hs_submission, hs_scores)
        record = await store.fetch(AUDIT_ID)
        assert record.report_status == "pending"
        assert record.ai_report is None
        assert not record.is_terminal

    @pytest.mark.asyncio
    async def test_fetch_completed(self, store, hs_submission, hs_scores, ai_report_payload):
        await store.record_audit(AUDIT_ID, hs_submission, hs_scores)
        await store.save_report(AUDIT_ID, AIReportData.from_dict(ai_report_payload), model="m")
        await store.mark_completed(AUDIT_ID)

        record = await store.fetch(AUDIT_ID)
        assert record.is_terminal
        assert record.to_dict()["aiReport"] == ai_report_payload
        assert record.to_dict()["reportStatus"] == "completed"

    @pytest.mark.asyncio
    async def test_fetch_unknown(self, store):
        with pytest.raises(NotFoundError):
            await store.fetch("missing")

    @pytest.mark.asyncio
    async def test_listener_sees_report_already_saved(self, store, hs_submission, hs_scores, ai_report_payload):
        seen = []

        async def listener(audit_id, status):
            seen.append((audit_id, status, get_report(audit_id)))

        store.add_listener(listener)
        await store.record_audit(AUDIT_ID, hs_submission, hs_scores)
        await store.save_report(AUDIT_ID, AIReportData.from_dict(ai_report_payload))
        await store.mark_completed(AUDIT_ID)

        assert seen == [(AUDIT_ID, ReportStatus.COMPLETED, ai_report_payload)]

    @pytest.mark.asyncio
    async def test_listener_fires_once_per_transition(self, store, hs_submission, hs_scores):
        listener = AsyncMock()
        store.add_listener(listener)
        await store.record_audit(AUDIT_ID, hs_submission, hs_scores)

        assert await store.mark_failed(AUDIT_ID) is True
        assert await store.mark_failed(AUDIT_ID) is False
        assert await store.mark_completed(AUDIT_ID) is False
        listener.assert_awaited_once_with(AUDIT_ID, ReportStatus.FAILED)

    @pytest.mark.asyncio
    async def test_listener_failure_is_contained(self, store, hs_submission, hs_scores):
        after = AsyncMock()
        store.add_listener(AsyncMock(side_effect=RuntimeError("mail server down")))
        store.add_listener(after)
        await store.record_audit(AUDIT_ID, hs_submission, hs_scores)

        assert await store.mark_completed(AUDIT_ID) is True
        after.assert_awaited_once()
        assert get_report_status(AUDIT_ID) is ReportStatus.COMPLETED


@pytest.mark.unit
class TestReportRecord:

    def test_from_dict_of_wire_payload(self, ai_report_payload):
        record = ReportRecord.from_dict({
            "audit": {"id": AUDIT_ID},
            "aiReport": ai_report_payload,
            "reportStatus": "completed",
        })
        assert record.is_terminal
        assert record.ai_report.gaps[0].title == "No Operational Scorecard"

    def test_missing_status_is_pending(self):
        record = ReportRecord.from_dict({"audit": {"id": AUDIT_ID}})
        assert record.report_status == "pending"
        assert record.ai_report is None


@pytest.mark.unit
class TestSubmissionGateway:

    @pytest.mark.asyncio
    async def test_issues_id_and_records(self, hs_submission, hs_scores):
        store = MagicMock()
        store.record_audit = AsyncMock(return_value=True)

        receipt = await SubmissionGateway(store).submit(hs_submission, hs_scores)

        assert receipt.persisted
        assert receipt.notice is None
        assert len(receipt.audit_id) == 36
        store.record_audit.assert_awaited_once_with(receipt.audit_id, hs_submission, hs_scores)

    @pytest.mark.asyncio
    async def test_duplicate_keeps_id(self, hs_submission, hs_scores):
        store = MagicMock()
        store.record_audit = AsyncMock(return_value=False)

        receipt = await SubmissionGateway(store).submit(hs_submission, hs_scores, audit_id=AUDIT_ID)

        assert receipt.audit_id == AUDIT_ID
        assert receipt.persisted

    @pytest.mark.asyncio
    async def test_save_failure_falls_back_to_local_id(self, hs_submission, hs_scores):
        store = MagicMock()
        store.record_audit = AsyncMock(side_effect=PersistenceError("Audit insert failed"))

        receipt = await SubmissionGateway(store).submit(hs_submission, hs_scores, audit_id=AUDIT_ID)

        assert not receipt.persisted
        assert is_local_id(receipt.audit_id)
        assert receipt.notice == SAVE_FAILED_NOTICE
