"""
Tests for the report read path: ReportPoller and ReportAPIClient.
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from bizaudit.errors import NotFoundError, ReportFetchError
from bizaudit.persistence import ReportAPIClient, ReportPoller, ReportRecord

AUDIT_ID = "3f2b9c1e-0000-4000-8000-000000000001"


def _record(status: str, report=None) -> ReportRecord:
    return ReportRecord.from_dict({
        "audit": {"id": AUDIT_ID, "report_status": status},
        "aiReport": report,
        "reportStatus": status,
    })


@pytest.fixture
def ticking_sleep(fake_clock):
    """asyncio.sleep stand-in that advances the fake clock."""
    return AsyncMock(side_effect=fake_clock.advance)


@pytest.mark.unit
class TestReportPoller:

    @pytest.mark.asyncio
    async def test_polls_until_completed(self, fake_clock, ticking_sleep, ai_report_payload):
        fetch = AsyncMock(side_effect=[
            _record("pending"),
            _record("pending"),
            _record("completed", ai_report_payload),
        ])
        poller = ReportPoller(fetch, interval=4.0, timeout=90.0, sleep=ticking_sleep, clock=fake_clock)

        outcome = await poller.poll(AUDIT_ID)

        assert outcome.status == "completed"
        assert not outcome.timed_out
        assert outcome.attempts == 3
        assert outcome.record.ai_report.gaps[0].title == "No Operational Scorecard"
        assert ticking_sleep.await_count == 2
        ticking_sleep.assert_awaited_with(4.0)

    @pytest.mark.asyncio
    async def test_failed_is_terminal(self, fake_clock, ticking_sleep):
        fetch = AsyncMock(return_value=_record("failed"))
        poller = ReportPoller(fetch, sleep=ticking_sleep, clock=fake_clock)

        outcome = await poller.poll(AUDIT_ID)

        assert outcome.status == "failed"
        assert outcome.record.ai_report is None
        ticking_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_gives_up_at_timeout(self, fake_clock, ticking_sleep):
        fetch = AsyncMock(return_value=_record("pending"))
        started = fake_clock()
        poller = ReportPoller(fetch, interval=4.0, timeout=90.0, sleep=ticking_sleep, clock=fake_clock)

        outcome = await poller.poll(AUDIT_ID)

        assert outcome.timed_out
        assert outcome.status == "pending"
        # Fetches at 0, 4, ..., 88s; one more sleep would overrun 90s
        assert outcome.attempts == 23
        assert fake_clock() - started <= 90.0

    @pytest.mark.asyncio
    async def test_not_found_is_distinct(self, fake_clock, ticking_sleep):
        fetch = AsyncMock(side_effect=[_record("pending"), NotFoundError(AUDIT_ID)])
        poller = ReportPoller(fetch, sleep=ticking_sleep, clock=fake_clock)

        with pytest.raises(NotFoundError):
            await poller.poll(AUDIT_ID)

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, fake_clock, ticking_sleep):
        fetch = AsyncMock(side_effect=ReportFetchError("Report fetch failed: ConnectError"))
        poller = ReportPoller(fetch, sleep=ticking_sleep, clock=fake_clock)

        with pytest.raises(ReportFetchError):
            await poller.poll(AUDIT_ID)


@pytest.mark.unit
class TestReportAPIClient:

    def _client(self, handler) -> ReportAPIClient:
        return ReportAPIClient("http://reports.test/", transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_fetch_report(self, ai_report_payload):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_record("completed", ai_report_payload).to_dict())

        async with self._client(handler) as client:
            record = await client.fetch_report(AUDIT_ID)

        assert record.report_status == "completed"
        assert record.ai_report.to_dict() == ai_report_payload
        assert requests[0].method == "POST"
        assert requests[0].url.path == "/api/reports/fetch"
        assert json.loads(requests[0].content) == {"auditId": AUDIT_ID}

    @pytest.mark.asyncio
    async def test_404_is_not_found(self):
        async with self._client(lambda r: httpx.Response(404, json={"error": "not_found"})) as client:
            with pytest.raises(NotFoundError):
                await client.fetch_report(AUDIT_ID)

    @pytest.mark.asyncio
    async def test_server_error_is_fetch_error(self):
        async with self._client(lambda r: httpx.Response(503)) as client:
            with pytest.raises(ReportFetchError) as exc_info:
                await client.fetch_report(AUDIT_ID)
        assert "503" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error_is_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with self._client(handler) as client:
            with pytest.raises(ReportFetchError):
                await client.fetch_report(AUDIT_ID)

    @pytest.mark.asyncio
    async def test_unreadable_body_is_fetch_error(self):
        async with self._client(lambda r: httpx.Response(200, text="<html>oops</html>")) as client:
            with pytest.raises(ReportFetchError):
                await client.fetch_report(AUDIT_ID)
