"""
Shared API Dependencies

Process-wide singletons for the report flow. Override in tests through
app.dependency_overrides.
"""

import logging
from functools import lru_cache

from bizaudit.analyzer import create_claude_client
from bizaudit.delivery import NotificationConsumer
from bizaudit.orchestrator import ReportGenerator, ReportOrchestrator
from bizaudit.persistence import ReportStore
from bizaudit.ratelimit import DualRateLimiter

logger = logging.getLogger(__name__)


@lru_cache
def get_report_store() -> ReportStore:
    store = ReportStore()
    store.add_listener(NotificationConsumer())
    return store


@lru_cache
def get_orchestrator() -> ReportOrchestrator:
    store = get_report_store()
    client = create_claude_client()
    generator = None
    if client is not None:
        generator = ReportGenerator(client, DualRateLimiter.from_settings(), store)
    return ReportOrchestrator(store, generator)
