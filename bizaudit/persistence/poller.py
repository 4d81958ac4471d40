"""
Report Poller

Read path for callers that have no in-process orchestration result (page
reload, shared link). Polls the report status every interval while it is
pending, and gives up after a hard timeout so the caller can offer a manual
refresh instead of polling forever.

Three outcomes are kept apart:
- NotFoundError: the id is unknown (invalid or expired link)
- PollOutcome(timed_out=True): still pending when time ran out
- ReportFetchError: the fetch itself failed (retry later)
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx

from bizaudit.errors import NotFoundError, ReportFetchError
from bizaudit.utils.config import get_settings

from .store import ReportRecord

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 4.0
DEFAULT_TIMEOUT_SECONDS = 90.0

FetchFn = Callable[[str], Awaitable[ReportRecord]]


@dataclass
class PollOutcome:
    status: str
    record: Optional[ReportRecord]
    timed_out: bool = False
    attempts: int = 0


class ReportPoller:
    """
    Poll a fetch callable until the report status is terminal.

    Usage:
        poller = ReportPoller(store.fetch)
        outcome = await poller.poll(audit_id)
        if outcome.timed_out:
            ...  # show manual refresh
    """

    def __init__(
        self,
        fetch: FetchFn,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self.interval = interval
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    async def poll(self, audit_id: str) -> PollOutcome:
        """
        Raises:
            NotFoundError: unknown id, on any fetch
            ReportFetchError: transport failure, on any fetch
        """
        started = self._clock()
        attempts = 0

        while True:
            record = await self._fetch(audit_id)
            attempts += 1

            if record.is_terminal:
                logger.info(f"[{audit_id}] Report {record.report_status} after {attempts} poll(s)")
                return PollOutcome(record.report_status, record, attempts=attempts)

            elapsed = self._clock() - started
            if elapsed + self.interval > self.timeout:
                logger.warning(f"[{audit_id}] Still pending after {elapsed:.0f}s, giving up")
                return PollOutcome(record.report_status, record, timed_out=True, attempts=attempts)

            await self._sleep(self.interval)


# =============================================================================
# HTTP CLIENT
# =============================================================================

class ReportAPIClient:
    """
    Async client for a deployed report fetch endpoint.

    Usage:
        client = ReportAPIClient("https://api.example.com")
        record = await client.fetch_report(audit_id)
        await client.close()
    """

    FETCH_PATH = "/api/reports/fetch"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(timeout or settings.API_TIMEOUT),
            transport=transport,
        )

    async def fetch_report(self, audit_id: str) -> ReportRecord:
        """
        Raises:
            NotFoundError: 404 from the endpoint
            ReportFetchError: any other non-2xx status, transport error or bad body
        """
        try:
            response = await self._client.post(self.FETCH_PATH, json={"auditId": audit_id})
        except httpx.HTTPError as e:
            logger.warning(f"[{audit_id}] Report fetch failed: {type(e).__name__}: {e}")
            raise ReportFetchError(f"Report fetch failed: {type(e).__name__}") from e

        if response.status_code == 404:
            raise NotFoundError(audit_id)
        if not response.is_success:
            logger.warning(f"[{audit_id}] Report fetch returned HTTP {response.status_code}")
            raise ReportFetchError(f"Report fetch returned HTTP {response.status_code}")

        try:
            return ReportRecord.from_dict(response.json())
        except ValueError as e:
            raise ReportFetchError("Report fetch returned an unreadable body") from e

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ReportAPIClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
