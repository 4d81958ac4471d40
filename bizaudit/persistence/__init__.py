"""Async report persistence and the polling read path."""

from .poller import PollOutcome, ReportAPIClient, ReportPoller
from .store import ReportRecord, ReportStore

__all__ = [
    "PollOutcome",
    "ReportAPIClient",
    "ReportPoller",
    "ReportRecord",
    "ReportStore",
]
