#!/usr/bin/env python3
"""
Poll a Report

Polls a deployed API for an audit's AI report, the same way a reloaded
report page does (every 4s, giving up after 90s).

Usage:
    export API_BASE_URL=https://api.example.com
    python scripts/poll_report.py 3f2b9c1e-...

    # Custom timing:
    python scripts/poll_report.py 3f2b9c1e-... --interval 2 --timeout 30
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from bizaudit.errors import NotFoundError, ReportFetchError
from bizaudit.persistence import ReportAPIClient, ReportPoller
from bizaudit.utils.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def poll(audit_id: str, base_url: str, interval: float, timeout: float) -> int:
    async with ReportAPIClient(base_url) as client:
        poller = ReportPoller(client.fetch_report, interval=interval, timeout=timeout)
        try:
            outcome = await poller.poll(audit_id)
        except NotFoundError:
            print(f"✗ Audit {audit_id} not found (invalid or expired link)")
            return 2
        except ReportFetchError as e:
            print(f"✗ Could not reach the report service: {e.message}. Try again later.")
            return 3

    print(f"\n{'='*70}")
    print(f"Audit:   {audit_id}")
    print(f"Status:  {outcome.status} after {outcome.attempts} poll(s)")
    print(f"{'='*70}")

    if outcome.timed_out:
        print("⚠ Still generating. Refresh manually in a minute.")
        return 1

    report = outcome.record.ai_report if outcome.record else None
    if report:
        print(f"✓ AI report: {len(report.gaps)} gaps, {len(report.quick_wins)} quick wins, "
              f"{len(report.strategic_recommendations)} recommendations")
        print(f"\n{report.executive_summary}")
    else:
        print("✓ No AI report; the standard report applies")
    return 0


def main() -> int:
    load_dotenv()
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Poll a deployed API for an audit report")
    parser.add_argument("audit_id", help="Audit id returned by POST /api/audits")
    parser.add_argument("--base-url", default=settings.API_BASE_URL, help="API base URL")
    parser.add_argument("--interval", type=float, default=settings.POLL_INTERVAL_SECONDS)
    parser.add_argument("--timeout", type=float, default=settings.POLL_TIMEOUT_SECONDS)
    args = parser.parse_args()

    return asyncio.run(poll(args.audit_id, args.base_url, args.interval, args.timeout))


if __name__ == "__main__":
    sys.exit(main())
