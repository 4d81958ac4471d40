"""
Question Sets

Which answers feed which category, per vertical. Every listed question always
contributes a sub-score; an unanswered single-select question takes the
catalog default like any other unmapped value. Sub-verticals swap option
lists in the UI but never change these sets.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .catalog import get_lookup
from .normalizer import (
    CountBreakpoints,
    KPI_BREAKPOINTS,
    LEAD_SOURCE_BREAKPOINTS,
    PAYMENT_METHOD_BREAKPOINTS,
    TOOLS_BREAKPOINTS,
    score_answer,
    score_rating,
    score_selection,
)
from .subniches import Niche

# Question kinds
SINGLE = "single"
MULTI = "multi"
RATING = "rating"


@dataclass(frozen=True)
class Question:
    """One scored answer: where it lives and how it turns into a sub-score."""
    step: str
    field: str
    kind: str = SINGLE
    table_id: Optional[str] = None
    breakpoints: Optional[CountBreakpoints] = None

    def score(self, answers: Mapping[str, Mapping[str, Any]]) -> int:
        value = (answers.get(self.step) or {}).get(self.field)
        if self.kind == MULTI:
            return score_selection(value, self.breakpoints)
        if self.kind == RATING:
            return score_rating(value)
        return score_answer(value, get_lookup(self.table_id))


def _single(step: str, field: str, table_id: str) -> Question:
    return Question(step, field, SINGLE, table_id=table_id)


def _multi(step: str, field: str, breakpoints: CountBreakpoints) -> Question:
    return Question(step, field, MULTI, breakpoints=breakpoints)


# =============================================================================
# CATEGORY LABELS
# =============================================================================

CATEGORY_LABELS: Dict[str, str] = {
    "technology": "Technology & Software",
    "leads": "Lead Funnel & Marketing",
    "scheduling": "Scheduling & Dispatch",
    "communication": "Communication",
    "followUp": "Follow-Up & Retention",
    "operations": "Operations & Accountability",
    "financial": "Financial Operations",
}

# Real estate teams answer lead-management questions in the scheduling slot
REAL_ESTATE_SCHEDULING_LABEL = "Lead Management"


def category_label(category: str, niche: Niche) -> str:
    if category == "scheduling" and niche is Niche.REAL_ESTATE:
        return REAL_ESTATE_SCHEDULING_LABEL
    return CATEGORY_LABELS[category]


# =============================================================================
# SHARED QUESTIONS
# =============================================================================

_TECHNOLOGY = (
    Question("step2", "crmSatisfaction", RATING),
    _multi("step2", "toolsUsed", TOOLS_BREAKPOINTS),
)

_LEADS = (
    _multi("step3", "leadSources", LEAD_SOURCE_BREAKPOINTS),
    _single("step3", "responseSpeed", "response_speed"),
    _single("step3", "leadTracking", "lead_tracking"),
    _single("step3", "conversionRate", "conversion_rate"),
    _single("step3", "googleReviews", "reviews"),
    _single("step3", "reviewAutomation", "automation"),
)

_COMMUNICATION = (
    _single("step5", "internalComms", "internal_comms"),
    _single("step5", "afterHoursComms", "after_hours"),
    _single("step5", "clientPortal", "client_portal"),
)

_FOLLOW_UP = (
    _single("step6", "repeatBusinessPercent", "repeat_business"),
)

_OPERATIONS = (
    _multi("step7", "kpisTracked", KPI_BREAKPOINTS),
)

_FINANCIAL = (
    _multi("step8", "paymentMethods", PAYMENT_METHOD_BREAKPOINTS),
    _single("step8", "financialReview", "financial_review"),
)


# =============================================================================
# HOME SERVICES
# =============================================================================

HOME_SERVICES_QUESTIONS: Dict[str, Tuple[Question, ...]] = {
    "technology": _TECHNOLOGY,
    "leads": _LEADS + (
        _single("step3", "missedCallHandling", "missed_call_handling"),
    ),
    "scheduling": (
        _single("step4", "schedulingMethod", "scheduling"),
        _single("step4", "dispatchMethod", "dispatch"),
        _single("step4", "routeOptimization", "route_optimization"),
        _single("step4", "realTimeTracking", "real_time_tracking"),
        _single("step4", "capacityPlanning", "capacity_planning"),
        _single("step4", "emergencyHandling", "emergency_handling"),
    ),
    "communication": _COMMUNICATION + (
        _single("step5", "appointmentReminders", "communication"),
        _single("step5", "onTheWayNotifications", "communication"),
        _single("step5", "jobCompletionComms", "job_completion_comms"),
    ),
    "followUp": _FOLLOW_UP + (
        _single("step6", "postJobFollowUp", "post_job_follow_up"),
        _single("step6", "maintenanceReminders", "automation"),
        _single("step6", "serviceAgreements", "service_agreements"),
        _single("step6", "estimateFollowUp", "estimate_follow_up"),
        _single("step6", "warrantyTracking", "warranty_tracking"),
    ),
    "operations": _OPERATIONS + (
        _single("step7", "performanceMeasurement", "performance"),
        _single("step7", "jobCosting", "job_costing"),
        _single("step7", "inventoryManagement", "inventory"),
        _single("step7", "timeTracking", "time_tracking"),
        _single("step7", "qualityControl", "quality_control"),
    ),
    "financial": _FINANCIAL + (
        _single("step8", "estimateProcess", "estimate"),
        _single("step8", "pricingModel", "pricing"),
        _single("step8", "invoiceTiming", "invoice_timing"),
        _single("step8", "collectionsProcess", "collections"),
    ),
}


# =============================================================================
# REAL ESTATE
# =============================================================================

REAL_ESTATE_QUESTIONS: Dict[str, Tuple[Question, ...]] = {
    "technology": _TECHNOLOGY,
    "leads": _LEADS + (
        _single("step3", "touchesIn7Days", "touches_in_7_days"),
        _single("step3", "leadDistribution", "lead_distribution"),
    ),
    "scheduling": (
        _single("step4", "followUpPlan", "follow_up_plan"),
        _single("step4", "nurtureDuration", "nurture_duration"),
        _single("step4", "automatedDrip", "automated_drip"),
        _single("step4", "leadTemperatureTracking", "lead_temperature"),
        _single("step4", "activityLogging", "activity_logging"),
        _single("step4", "coldLeadHandling", "cold_lead_handling"),
    ),
    "communication": _COMMUNICATION + (
        _single("step5", "agentClientComms", "communication"),
        _single("step5", "transactionUpdates", "transaction_updates"),
        _single("step5", "pastClientEngagement", "past_client_engagement"),
    ),
    "followUp": _FOLLOW_UP + (
        _single("step6", "postCloseFollowUp", "post_close_follow_up"),
        _single("step6", "pastClientContact", "past_client_contact"),
        _single("step6", "referralProcess", "referral_process"),
        _single("step6", "lostLeadFollowUp", "lost_lead_follow_up"),
        _single("step6", "anniversaryTracking", "anniversary_tracking"),
    ),
    "operations": _OPERATIONS + (
        _single("step7", "agentPerformanceMeasurement", "performance"),
        _single("step7", "agentAccountability", "agent_accountability"),
        _single("step7", "transactionWorkflow", "transaction_workflow"),
        _single("step7", "agentOnboarding", "agent_onboarding"),
    ),
    "financial": _FINANCIAL + (
        _single("step8", "expenseTracking", "expense_tracking"),
        _single("step8", "teamPnL", "financial_review"),
        _single("step8", "commissionDisbursement", "commission_disbursement"),
        _single("step8", "marketingBudget", "marketing_budget"),
    ),
}


def questions_for(niche: Niche) -> Dict[str, Tuple[Question, ...]]:
    """Category -> question set for a vertical."""
    if niche is Niche.REAL_ESTATE:
        return REAL_ESTATE_QUESTIONS
    return HOME_SERVICES_QUESTIONS


def single_select_questions(niche: Niche) -> List[Question]:
    """Every lookup-table question for a vertical, in category order."""
    return [
        q
        for qs in questions_for(niche).values()
        for q in qs
        if q.kind == SINGLE
    ]
