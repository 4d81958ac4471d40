"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import copy
import json
from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest

from bizaudit.analyzer.client import CompletionResponse, TokenUsage
from bizaudit.database import init_db, reset_engine
from bizaudit.models import AuditSubmission
from bizaudit.scoring.engine import compute_scores


# ============================================================================
# Questionnaire Fixtures
# ============================================================================

HOME_SERVICES_FORM: Dict[str, Any] = {
    "niche": "home_services",
    "subNiche": "hvac",
    "partnerCode": "PARTNER-7",
    "step1": {
        "businessName": "Summit Heating & Air",
        "contactName": "Dana Reyes",
        "email": "Dana@SummitHVAC.com",
        "phone": "555-0100",
        "industry": "HVAC",
        "employeeCount": "11-25",
        "annualRevenue": "$1M-$3M",
    },
    "step2": {
        "primaryCRM": "ServiceTitan",
        "crmSatisfaction": 4,
        "toolsUsed": ["QuickBooks", "Google Calendar", "Slack", "Podium", "CompanyCam"],
        "techFrustrations": "Too many <b>disconnected</b> apps 😩",
    },
    "step3": {
        "leadSources": ["Google Ads", "Referrals", "Google Business Profile", "Facebook"],
        "responseSpeed": "Under 5 minutes",
        "leadTracking": "crm_pipeline",
        "conversionRate": "yes_30_50",
        "googleReviews": "r51_100",
        "reviewAutomation": "Yes — automated via software",
        "missedCallHandling": "voicemail_asap",
    },
    "step4": {
        "schedulingMethod": "software_board",
        "dispatchMethod": "automated",
        "routeOptimization": "manual_cluster",
        "realTimeTracking": "gps",
        "capacityPlanning": "eyeball",
        "emergencyHandling": "shuffle",
    },
    "step5": {
        "internalComms": "field_app",
        "afterHoursComms": "answering_service",
        "clientPortal": "wanted",
        "appointmentReminders": "text_and_email",
        "onTheWayNotifications": "text_only",
        "jobCompletionComms": "digital_summary",
    },
    "step6": {
        "repeatBusinessPercent": "pct_30_50",
        "postJobFollowUp": "review_request",
        "maintenanceReminders": "manual_sometimes",
        "serviceAgreements": "rarely_sold",
        "estimateFollowUp": "manual_week",
        "warrantyTracking": "spreadsheet",
    },
    "step7": {
        "kpisTracked": ["Revenue", "Average ticket", "Close rate"],
        "performanceMeasurement": "monthly_reports",
        "jobCosting": "estimated",
        "inventoryManagement": "spreadsheet",
        "timeTracking": "clock_in",
        "qualityControl": "reactive",
    },
    "step8": {
        "paymentMethods": ["Card", "Check", "ACH"],
        "financialReview": "quarterly",
        "estimateProcess": "pdf_email",
        "pricingModel": "flat_rate",
        "invoiceTiming": "same_day",
        "collectionsProcess": "manual",
        "biggestChallenge": "Keeping techs busy in the shoulder season.",
    },
}

# Category scores the form above produces
HOME_SERVICES_CATEGORY_SCORES = {
    "technology": 83,
    "leads": 86,
    "scheduling": 67,
    "communication": 78,
    "followUp": 39,
    "operations": 33,
    "financial": 67,
}

REAL_ESTATE_FORM: Dict[str, Any] = {
    "niche": "real_estate",
    "subNiche": "residential_sales",
    "step1": {
        "businessName": "Harbor Home Group",
        "contactName": "Sam Okafor",
        "email": "sam@harborhome.example",
        "role": "Team Lead",
        "teamSize": "6-10",
    },
    "step2": {
        "primaryCRM": "Follow Up Boss",
        "crmSatisfaction": 2,
    },
    "step3": {
        "leadSources": ["Zillow", "Referrals"],
        "responseSpeed": "Next business day or later",
    },
}


@pytest.fixture
def hs_form_state() -> Dict[str, Any]:
    """Answered home services questionnaire (fresh copy per test)."""
    return copy.deepcopy(HOME_SERVICES_FORM)


@pytest.fixture
def re_form_state() -> Dict[str, Any]:
    """Minimal real estate questionnaire; most questions unanswered."""
    return copy.deepcopy(REAL_ESTATE_FORM)


@pytest.fixture
def hs_submission(hs_form_state) -> AuditSubmission:
    return AuditSubmission.from_form_state(hs_form_state)


@pytest.fixture
def re_submission(re_form_state) -> AuditSubmission:
    return AuditSubmission.from_form_state(re_form_state)


@pytest.fixture
def hs_scores(hs_submission):
    return compute_scores(hs_submission)


@pytest.fixture
def hs_expected_category_scores() -> Dict[str, int]:
    return dict(HOME_SERVICES_CATEGORY_SCORES)


@pytest.fixture
def re_scores(re_submission):
    return compute_scores(re_submission)


# ============================================================================
# AI Report Fixtures
# ============================================================================

@pytest.fixture
def ai_report_payload() -> Dict[str, Any]:
    """Well-formed report as the model is asked to return it."""
    return {
        "executiveSummary": "Summit Heating & Air scored 66/100, with strong lead handling.",
        "gaps": [
            {
                "title": "No Operational Scorecard",
                "description": "Decisions rely on gut feel.",
                "impact": "Margin leaks go unnoticed",
                "priority": "high",
                "cta": "Let us build your scorecard, book a call",
            },
            {
                "title": "Thin Retention Program",
                "description": "Past customers rarely hear from you.",
                "impact": "Repeat revenue left on the table",
                "priority": "medium",
                "cta": "We can automate your retention touchpoints",
            },
        ],
        "quickWins": [
            {
                "title": "Post-Job Review Ask",
                "description": "Send a review link after every completed job.",
                "timeframe": "This week",
                "priority": "high",
                "cta": "Book a call to set it up",
            },
        ],
        "strategicRecommendations": [
            {
                "title": "Maintenance Agreement Program",
                "description": "Package seasonal tune-ups as a membership.",
                "roi": "Predictable off-season revenue",
                "priority": "medium",
                "cta": "Let's design your membership offer",
            },
        ],
    }


@pytest.fixture
def ai_report_text(ai_report_payload) -> str:
    return json.dumps(ai_report_payload)


def make_completion(content: str, stop_reason: str = "end_turn") -> CompletionResponse:
    return CompletionResponse(
        content=content,
        usage=TokenUsage(input_tokens=1200, output_tokens=800),
        model="claude-haiku-4-5-20251001",
        stop_reason=stop_reason,
    )


@pytest.fixture
def completion():
    """Factory for CompletionResponse objects."""
    return make_completion


@pytest.fixture
def mock_claude_client(ai_report_text):
    """Claude client whose complete() returns a valid report."""
    client = MagicMock()
    client.model = "claude-haiku-4-5-20251001"
    client.complete = AsyncMock(return_value=make_completion(ai_report_text))
    return client


@pytest.fixture
def passing_limiter():
    limiter = MagicMock()
    limiter.check = AsyncMock(return_value=None)
    return limiter


# ============================================================================
# Infrastructure Fixtures
# ============================================================================

@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Fresh SQLite database for one test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'bizaudit_test.db'}")
    reset_engine()
    init_db()
    yield
    reset_engine()


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def no_sleep():
    """Recording stand-in for asyncio.sleep."""
    return AsyncMock(return_value=None)


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
