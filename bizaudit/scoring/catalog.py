"""
Answer Catalog

Every single-select lookup table, defined once. Each option carries a
stable answer code, its 0-3 sub-score and the English display text.

Sub-score meaning:
    0 = No process / major gap
    1 = Manual or inconsistent
    2 = Partial
    3 = Fully optimized

Codes are the scoring contract. Display text is only matched at the
boundary (see normalizer.py), so copy and translation edits never change
a score silently.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

CATALOG_VERSION = "2025.1"

# Score given to any value a table does not know
DEFAULT_SUB_SCORE = 1

MAX_SUB_SCORE = 3


@dataclass(frozen=True)
class AnswerOption:
    """One selectable answer."""
    code: str
    score: int
    label: str


@dataclass(frozen=True)
class ScoreLookup:
    """Static table mapping answers to sub-scores for one question family."""
    table_id: str
    options: Tuple[AnswerOption, ...]

    def by_code(self, code: str) -> Optional[AnswerOption]:
        for option in self.options:
            if option.code == code:
                return option
        return None

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(o.code for o in self.options)


def _lookup(table_id: str, *options: Tuple[str, int, str]) -> ScoreLookup:
    return ScoreLookup(table_id, tuple(AnswerOption(*o) for o in options))


# =============================================================================
# LEAD FUNNEL
# =============================================================================

RESPONSE_SPEED = _lookup(
    "response_speed",
    ("under_5_min", 3, "Under 5 minutes"),
    ("min_5_30", 2, "5–30 minutes"),
    ("min_30_60", 2, "30–60 minutes"),
    ("hours_1_4", 1, "1–4 hours"),
    ("same_day", 1, "Same business day"),
    ("next_day_or_later", 0, "Next business day or later"),
    ("no_process", 0, "No consistent process"),
    ("depends_on_agent", 1, "It depends on the agent"),
)

LEAD_TRACKING = _lookup(
    "lead_tracking",
    ("crm_pipeline", 3, "CRM with pipeline stages"),
    ("spreadsheet", 1, "Spreadsheet/Google Sheets"),
    ("notebook", 0, "Notebook/whiteboard"),
    ("software_inconsistent", 1, "Software but not consistently"),
    ("not_tracked", 0, "We don't really track this"),
)

CONVERSION_RATE = _lookup(
    "conversion_rate",
    ("yes_above_50", 3, "Yes - above 50%"),
    ("yes_30_50", 2, "Yes - 30–50%"),
    ("yes_under_30", 1, "Yes - under 30%"),
    ("no_not_tracked", 0, "No - we don't track this"),
    ("above_10", 3, "Above 10%"),
    ("pct_5_10", 2, "5–10%"),
    ("pct_2_5", 1, "2–5%"),
    ("under_2", 0, "Under 2%"),
    ("not_tracked", 0, "We don't track this"),
)

REVIEWS = _lookup(
    "reviews",
    ("r0_25", 0, "0–25"),
    ("r26_50", 1, "26–50"),
    ("r51_100", 2, "51–100"),
    ("r101_250", 3, "101–250"),
    ("r250_plus", 3, "250+"),
)

AUTOMATION = _lookup(
    "automation",
    ("automated_software", 3, "Yes - automated via software"),
    ("automated", 3, "Yes - automated"),
    ("manual_sometimes", 1, "Yes - manual/sometimes"),
    ("manual_ask", 1, "Yes - manually ask sometimes"),
    ("no", 0, "No"),
)

MISSED_CALL_HANDLING = _lookup(
    "missed_call_handling",
    ("auto_text_back", 3, "Auto text-back within seconds"),
    ("voicemail_asap", 2, "Voicemail - we call back ASAP"),
    ("voicemail_eventually", 1, "Voicemail - we call back when we can"),
    ("answering_service", 2, "Answering service"),
    ("missed", 0, "We probably miss some and never follow up"),
)

TOUCHES_IN_7_DAYS = _lookup(
    "touches_in_7_days",
    ("touches_8_plus", 3, "8+ touches"),
    ("touches_5_7", 2, "5–7 touches"),
    ("touches_2_4", 1, "2–4 touches"),
    ("touch_1", 0, "1 touch"),
    ("none", 0, "No consistent follow-up plan"),
)

LEAD_DISTRIBUTION = _lookup(
    "lead_distribution",
    ("round_robin_auto", 3, "Round robin - automated"),
    ("round_robin_manual", 2, "Round robin - manual"),
    ("pond", 1, "Pond/claim system"),
    ("by_source_or_area", 2, "Assigned by source or area"),
    ("first_grab", 1, "First to grab it"),
    ("none", 0, "No formal system"),
)

# =============================================================================
# SCHEDULING & DISPATCH (home services)
# =============================================================================

SCHEDULING = _lookup(
    "scheduling",
    ("software_board", 3, "Software with drag-and-drop board"),
    ("calendar", 1, "Google/Outlook Calendar"),
    ("phone_whiteboard", 0, "Phone calls and a whiteboard"),
    ("paper", 0, "Paper schedule"),
    ("none", 0, "No real system"),
)

DISPATCH = _lookup(
    "dispatch",
    ("automated", 3, "Automated through software"),
    ("manual", 1, "Manual - office calls/texts techs"),
    ("shared_calendar", 1, "Techs check a shared calendar"),
    ("mixed", 1, "Mixed approach"),
)

ROUTE_OPTIMIZATION = _lookup(
    "route_optimization",
    ("software", 3, "Yes - software optimized"),
    ("manual_cluster", 1, "We try to cluster jobs manually"),
    ("no", 0, "No"),
)

REAL_TIME_TRACKING = _lookup(
    "real_time_tracking",
    ("gps", 3, "Yes - GPS tracking"),
    ("no", 0, "No"),
)

CAPACITY_PLANNING = _lookup(
    "capacity_planning",
    ("software", 3, "Software manages availability"),
    ("eyeball", 1, "We eyeball it"),
    ("over_under", 0, "We often overbook or underbook"),
)

EMERGENCY_HANDLING = _lookup(
    "emergency_handling",
    ("reserved_slots", 3, "Dedicated slots held open"),
    ("shuffle", 1, "We shuffle the schedule"),
    ("cannot", 0, "We usually can't accommodate them"),
    ("chaotic", 0, "It's chaotic"),
)

# =============================================================================
# LEAD MANAGEMENT (real estate)
# =============================================================================

FOLLOW_UP_PLAN = _lookup(
    "follow_up_plan",
    ("automated_drip", 3, "Yes - automated drip campaigns"),
    ("manual_documented", 2, "Yes - manual but documented"),
    ("agent_driven", 1, "Sort of - agents do their own thing"),
    ("none", 0, "No formal plan"),
)

NURTURE_DURATION = _lookup(
    "nurture_duration",
    ("days_30_or_less", 0, "30 days or less"),
    ("months_1_3", 1, "1–3 months"),
    ("months_3_6", 2, "3–6 months"),
    ("months_6_12", 3, "6–12 months"),
    ("indefinitely", 3, "We nurture indefinitely"),
    ("agent_decides", 0, "Agents decide for themselves"),
)

AUTOMATED_DRIP = _lookup(
    "automated_drip",
    ("full", 3, "Yes - fully automated"),
    ("partial", 1, "Yes - partially automated"),
    ("no", 0, "No"),
)

LEAD_TEMPERATURE = _lookup(
    "lead_temperature",
    ("crm_scoring", 3, "CRM lead scoring"),
    ("crm_tags", 2, "Manual tags/labels in CRM"),
    ("mental_notes", 0, "Agents keep mental notes"),
    ("none", 0, "We don't differentiate"),
)

ACTIVITY_LOGGING = _lookup(
    "activity_logging",
    ("consistent", 3, "Yes - consistently"),
    ("sometimes", 1, "Sometimes"),
    ("rarely", 0, "Rarely"),
    ("not_required", 0, "We don't require it"),
)

COLD_LEAD_HANDLING = _lookup(
    "cold_lead_handling",
    ("automated_nurture", 3, "Long-term automated nurture"),
    ("manual_2_weeks", 1, "Manual follow-up for 2+ weeks"),
    ("few_attempts", 0, "A few attempts then move on"),
    ("give_up", 0, "We mostly give up"),
)

# =============================================================================
# COMMUNICATION
# =============================================================================

# Shared by reminders, on-the-way notifications and agent-client comms
COMMUNICATION = _lookup(
    "communication",
    ("text_and_email", 3, "Yes - text and email"),
    ("email_only", 2, "Yes - email only"),
    ("text_only", 2, "Yes - text only"),
    ("manual_call", 1, "No - we call manually"),
    ("no_reminders", 0, "No reminders sent"),
    ("automated", 3, "Yes - automated"),
    ("sometimes_manual", 1, "Sometimes manually"),
    ("no", 0, "No"),
    ("crm_logged", 3, "CRM-based communication (logged)"),
    ("personal_unlogged", 0, "Personal phone/text (not logged)"),
    ("mixed", 1, "Mix of both"),
    ("varies", 0, "Varies by agent"),
)

INTERNAL_COMMS = _lookup(
    "internal_comms",
    ("field_app", 3, "Field service app/software"),
    ("team_app", 3, "Team app (Slack, Teams, etc.)"),
    ("group_chat", 2, "Group text/chat app"),
    ("group_text", 1, "Group text"),
    ("phone", 1, "Phone calls"),
    ("email", 1, "Email"),
    ("mixed", 0, "Mixed/inconsistent"),
    ("in_person", 0, "In-person meetings only"),
)

AFTER_HOURS = _lookup(
    "after_hours",
    ("ai_or_autoresponder", 3, "AI chatbot or auto-responder"),
    ("autoresponder", 3, "Auto-responder with info"),
    ("ai_chatbot", 3, "AI chatbot"),
    ("answering_service", 2, "Answering service"),
    ("voicemail", 1, "Voicemail with next-day callback"),
    ("unanswered", 0, "After-hours calls go unanswered"),
    ("unanswered_next_day", 0, "Goes unanswered until next day"),
    ("personal_phones", 1, "Agents handle on personal phones"),
)

CLIENT_PORTAL = _lookup(
    "client_portal",
    ("yes", 3, "Yes"),
    ("yes_software", 3, "Yes - through our software"),
    ("wanted", 1, "No but we want one"),
    ("not_priority", 0, "No and not a priority"),
)

JOB_COMPLETION_COMMS = _lookup(
    "job_completion_comms",
    ("digital_summary", 3, "Digital summary/invoice sent immediately"),
    ("verbal", 1, "We explain verbally"),
    ("paper", 0, "Paper invoice left behind"),
    ("none", 0, "No formal communication"),
)

TRANSACTION_UPDATES = _lookup(
    "transaction_updates",
    ("automated", 3, "Yes - key milestones automated"),
    ("manual_some", 1, "Some manual updates"),
    ("agent_handled", 0, "No - agents handle individually"),
)

PAST_CLIENT_ENGAGEMENT = _lookup(
    "past_client_engagement",
    ("automated_drip", 3, "Automated long-term drip"),
    ("annual", 2, "Annual check-ins/market updates"),
    ("occasional", 1, "Holiday cards/occasional emails"),
    ("none", 0, "We don't maintain contact consistently"),
)

# =============================================================================
# FOLLOW-UP & RETENTION
# =============================================================================

REPEAT_BUSINESS = _lookup(
    "repeat_business",
    ("over_50", 3, "Over 50%"),
    ("pct_30_50", 2, "30–50%"),
    ("pct_10_30", 1, "10–30%"),
    ("under_10", 0, "Under 10%"),
    ("unknown", 0, "We don't know"),
    ("not_tracked", 0, "We don't track this"),
)

POST_JOB_FOLLOW_UP = _lookup(
    "post_job_follow_up",
    ("automated_sequence", 3,
     "Automated follow-up sequence (thank you + review request + maintenance reminder)"),
    ("review_request", 1, "We send a review request"),
    ("none", 0, "Nothing formal"),
    ("tech_dependent", 0, "Depends on the tech"),
)

SERVICE_AGREEMENTS = _lookup(
    "service_agreements",
    ("actively_sold", 3, "Yes - actively sold"),
    ("rarely_sold", 1, "Yes - but rarely sell them"),
    ("no", 0, "No"),
)

ESTIMATE_FOLLOW_UP = _lookup(
    "estimate_follow_up",
    ("automated", 3, "Automated follow-up sequence"),
    ("manual_week", 1, "Manual follow-up within a week"),
    ("if_remembered", 0, "We follow up if we remember"),
    ("none", 0, "We don't follow up"),
)

WARRANTY_TRACKING = _lookup(
    "warranty_tracking",
    ("software", 3, "Tracked in software"),
    ("spreadsheet", 1, "Tracked in spreadsheets"),
    ("none", 0, "We don't track this"),
)

POST_CLOSE_FOLLOW_UP = _lookup(
    "post_close_follow_up",
    ("automated", 3, "Automated post-close nurture sequence"),
    ("manual", 1, "Manual thank-you and check-in"),
    ("gift_only", 0, "Closing gift and that's about it"),
    ("none", 0, "Nothing formal"),
)

PAST_CLIENT_CONTACT = _lookup(
    "past_client_contact",
    ("crm_plan", 3, "CRM-based annual touchpoint plan"),
    ("occasional", 1, "Occasional emails/newsletters"),
    ("social_only", 0, "Social media only"),
    ("none", 0, "We don't have a system"),
)

REFERRAL_PROCESS = _lookup(
    "referral_process",
    ("automated", 3, "Yes - automated asks at key milestones"),
    ("manual_consistent", 2, "Yes - manual but consistent"),
    ("occasional", 1, "We ask occasionally"),
    ("none", 0, "No formal process"),
)

LOST_LEAD_FOLLOW_UP = _lookup(
    "lost_lead_follow_up",
    ("automated", 3, "Automated long-term nurture"),
    ("manual_weeks", 1, "Manual follow-up for a few weeks"),
    ("move_on", 0, "We mostly move on"),
    ("none", 0, "No process"),
)

ANNIVERSARY_TRACKING = _lookup(
    "anniversary_tracking",
    ("automated", 3, "Yes - automated"),
    ("manual", 1, "Yes - manual"),
    ("no", 0, "No"),
)

# =============================================================================
# OPERATIONS & ACCOUNTABILITY
# =============================================================================

PERFORMANCE = _lookup(
    "performance",
    ("software_kpis", 3, "KPIs tracked in software (revenue per tech, callback rate, etc.)"),
    ("crm_dashboards", 3, "CRM dashboards with KPIs"),
    ("quarterly_review", 1, "We review numbers quarterly"),
    ("spreadsheet", 1, "Spreadsheet tracking"),
    ("monthly_reports", 2, "Monthly production reports"),
    ("observation", 0, "Manager observation"),
    ("none", 0, "No formal measurement"),
)

JOB_COSTING = _lookup(
    "job_costing",
    ("per_job_software", 3, "Tracked per job in software"),
    ("estimated", 1, "Estimated but not tracked precisely"),
    ("guess", 0, "We mostly guess"),
    ("none", 0, "We don't track job costs"),
)

INVENTORY = _lookup(
    "inventory",
    ("software", 3, "Inventory management software"),
    ("spreadsheet", 1, "Spreadsheet tracking"),
    ("tech_managed", 0, "Techs manage their own trucks"),
    ("none", 0, "No formal tracking"),
)

TIME_TRACKING = _lookup(
    "time_tracking",
    ("gps_software", 3, "GPS + software time tracking"),
    ("timesheets", 1, "Manual time sheets"),
    ("clock_in", 1, "Clock in/clock out"),
    ("none", 0, "They don't log time"),
)

QUALITY_CONTROL = _lookup(
    "quality_control",
    ("checklist_survey", 3, "QA checklist + customer survey"),
    ("feedback_review", 2, "Customer feedback reviewed regularly"),
    ("reactive", 0, "Handle complaints as they come"),
    ("none", 0, "No formal process"),
)

AGENT_ACCOUNTABILITY = _lookup(
    "agent_accountability",
    ("crm_minimums", 3, "Daily/weekly activity minimums tracked in CRM"),
    ("weekly_meetings", 2, "Weekly team meetings with accountability"),
    ("informal", 1, "Informal check-ins"),
    ("none", 0, "No accountability system"),
)

TRANSACTION_WORKFLOW = _lookup(
    "transaction_workflow",
    ("tm_software", 3, "Transaction management software (Dotloop, SkySlope, etc.)"),
    ("crm_checklists", 2, "Checklists in CRM"),
    ("spreadsheet", 1, "Spreadsheet/Google Docs"),
    ("none", 0, "No standardized process"),
)

AGENT_ONBOARDING = _lookup(
    "agent_onboarding",
    ("documented", 3, "Documented training program + mentorship"),
    ("informal", 1, "Informal training"),
    ("shadowing", 1, "Shadow other agents"),
    ("none", 0, "Figure it out yourself"),
)

# =============================================================================
# FINANCIAL OPERATIONS
# =============================================================================

# Also used for the real estate team P&L question
FINANCIAL_REVIEW = _lookup(
    "financial_review",
    ("monthly_kpi", 3, "Monthly P&L and KPI review"),
    ("monthly_accountant", 3, "Monthly financial review with bookkeeper/accountant"),
    ("quarterly", 2, "Quarterly review"),
    ("annual_accountant", 1, "Annual with accountant"),
    ("annual", 1, "Annual review"),
    ("bank_balance", 0, "We check the bank account"),
    ("no_team_pnl", 0, "We don't track team P&L"),
)

ESTIMATE = _lookup(
    "estimate",
    ("software_digital", 3, "Software-generated with digital approval"),
    ("pdf_email", 2, "PDF/email quotes"),
    ("paper_verbal", 0, "Paper/verbal estimates"),
    ("none", 0, "No standard process"),
)

PRICING = _lookup(
    "pricing",
    ("flat_rate", 3, "Flat rate pricing"),
    ("time_materials", 1, "Time & materials"),
    ("mixed", 2, "Mix of both"),
    ("none", 0, "No standardized pricing"),
)

INVOICE_TIMING = _lookup(
    "invoice_timing",
    ("on_site", 3, "Immediately on-site (digital)"),
    ("same_day", 2, "Same day"),
    ("few_days", 1, "Within a few days"),
    ("varies", 0, "It varies a lot"),
)

COLLECTIONS = _lookup(
    "collections",
    ("automated", 3, "Automated reminders + escalation"),
    ("manual", 1, "Manual follow-up"),
    ("when_remembered", 0, "We chase when we remember"),
    ("write_offs", 0, "We write off a lot of receivables"),
)

EXPENSE_TRACKING = _lookup(
    "expense_tracking",
    ("team_software", 3, "Team/brokerage software"),
    ("spreadsheet", 1, "Spreadsheet"),
    ("accounting_software", 2, "Accounting software"),
    ("agent_handled", 0, "Agents handle their own"),
    ("none", 0, "No system"),
)

COMMISSION_DISBURSEMENT = _lookup(
    "commission_disbursement",
    ("automated", 3, "Automated through transaction management software"),
    ("manual", 1, "Manual but systematic"),
    ("ad_hoc", 0, "Ad hoc"),
)

MARKETING_BUDGET = _lookup(
    "marketing_budget",
    ("per_channel", 3, "Yes - detailed per-channel tracking"),
    ("total_spend", 2, "Yes - total spend tracked"),
    ("untracked_roi", 1, "We spend but don't track ROI"),
    ("none", 0, "No formal marketing budget"),
)


# =============================================================================
# REGISTRY
# =============================================================================

LOOKUPS: Mapping[str, ScoreLookup] = MappingProxyType({
    table.table_id: table
    for table in (
        RESPONSE_SPEED, LEAD_TRACKING, CONVERSION_RATE, REVIEWS, AUTOMATION,
        MISSED_CALL_HANDLING, TOUCHES_IN_7_DAYS, LEAD_DISTRIBUTION,
        SCHEDULING, DISPATCH, ROUTE_OPTIMIZATION, REAL_TIME_TRACKING,
        CAPACITY_PLANNING, EMERGENCY_HANDLING,
        FOLLOW_UP_PLAN, NURTURE_DURATION, AUTOMATED_DRIP, LEAD_TEMPERATURE,
        ACTIVITY_LOGGING, COLD_LEAD_HANDLING,
        COMMUNICATION, INTERNAL_COMMS, AFTER_HOURS, CLIENT_PORTAL,
        JOB_COMPLETION_COMMS, TRANSACTION_UPDATES, PAST_CLIENT_ENGAGEMENT,
        REPEAT_BUSINESS, POST_JOB_FOLLOW_UP, SERVICE_AGREEMENTS,
        ESTIMATE_FOLLOW_UP, WARRANTY_TRACKING, POST_CLOSE_FOLLOW_UP,
        PAST_CLIENT_CONTACT, REFERRAL_PROCESS, LOST_LEAD_FOLLOW_UP,
        ANNIVERSARY_TRACKING,
        PERFORMANCE, JOB_COSTING, INVENTORY, TIME_TRACKING, QUALITY_CONTROL,
        AGENT_ACCOUNTABILITY, TRANSACTION_WORKFLOW, AGENT_ONBOARDING,
        FINANCIAL_REVIEW, ESTIMATE, PRICING, INVOICE_TIMING, COLLECTIONS,
        EXPENSE_TRACKING, COMMISSION_DISBURSEMENT, MARKETING_BUDGET,
    )
})


def get_lookup(table_id: str) -> ScoreLookup:
    """Get a lookup table by id. Raises KeyError for unknown tables."""
    return LOOKUPS[table_id]


def catalog_labels() -> Dict[str, Dict[str, str]]:
    """
    English display text per table and code.

    Other locales translate at the UI boundary and submit codes.
    """
    return {
        table_id: {o.code: o.label for o in table.options}
        for table_id, table in LOOKUPS.items()
    }
