"""
Report Prompt Builder

Builds the system + user prompt for one AI report. The user prompt carries
business context only: contact name, email and phone never leave the
server, and every free-text answer is sanitised first.
"""

from dataclasses import dataclass
from typing import Any, List, Tuple

from bizaudit.models.scores import AuditScores
from bizaudit.models.submission import AuditSubmission
from bizaudit.scoring.subniches import get_sub_niche_label
from bizaudit.utils.sanitize import sanitize_business_name, sanitize_option, sanitize_text


@dataclass(frozen=True)
class ItemCounts:
    """How many items the model is asked for; gaps may be a range."""
    gaps: str
    quick_wins: str
    strategic_recommendations: str


def item_counts(overall: int) -> ItemCounts:
    """Lower scores get more remediation items."""
    if overall < 40:
        return ItemCounts("4-5", "3", "3")
    if overall <= 65:
        return ItemCounts("3", "3", "3")
    return ItemCounts("2", "2", "2")


SYSTEM_PROMPT_TEMPLATE = """You are a business operations advisor generating a personalized audit report.

Tone: Warm but honest. Encouraging with clear direction, not aggressive or hedging. Make the business owner feel understood and optimistic about what's possible.

Constraints:
- Never recommend third-party tools, software vendors, or specific products by name. Identify problems and their business impact, steering toward custom solutions and expert consultation.
- Reference industry benchmarks using phrases like "Most successful teams in your space..." without hard numbers or competitor names.
- Each gap, quick win, and recommendation MUST include a "cta" field with a personalized call-to-action nudging the reader to book a consultation call. Examples: "Let us automate your follow-up sequence, book a call", "We can build a custom scheduling system for your team".
- When a sub-niche is specified, tailor recommendations to that specific business type (e.g., "as a plumbing business" not just "home services"). Use your knowledge of that sub-niche's unique challenges and opportunities.

Item count based on overall score ({overall}/100):
- Generate {gaps} gaps
- Generate {quick_wins} quick wins
- Generate {strategic} strategic recommendations

JSON output instruction: Respond with ONLY valid JSON. Do not include markdown code fences, preamble, or explanation. The entire response must be parseable as JSON.

Required JSON schema:
{{
  "executiveSummary": "string (2-4 sentences, personalized paragraph referencing business name, niche, and overall score)",
  "gaps": [{{ "title": "string", "description": "string (2-3 sentences)", "impact": "string (one-liner)", "priority": "high|medium|low", "cta": "string" }}],
  "quickWins": [{{ "title": "string", "description": "string (actionable steps)", "timeframe": "string", "priority": "high|medium|low", "cta": "string" }}],
  "strategicRecommendations": [{{ "title": "string", "description": "string", "roi": "string", "priority": "high|medium|low", "cta": "string" }}]
}}"""


USER_PROMPT_TEMPLATE = """Generate a personalized business audit report for the following business.

Business: {business}
Niche: {niche}
{sub_niche_line}Overall Score: {overall}/100

Category Scores (weakest first):
{category_lines}

Key Business Context:
{context_lines}

{frustrations_line}
{challenge_line}

Generate the report now as valid JSON only."""


# =============================================================================
# BUSINESS CONTEXT  (step, field, prompt key)
# =============================================================================

_HOME_SERVICES_PROFILE = (
    ("step1", "industry", "industry"),
    ("step1", "employeeCount", "employeeCount"),
    ("step1", "annualRevenue", "annualRevenue"),
    ("step1", "yearsInBusiness", "yearsInBusiness"),
    ("step1", "serviceArea", "serviceArea"),
)

_REAL_ESTATE_PROFILE = (
    ("step1", "role", "role"),
    ("step1", "teamSize", "teamSize"),
    ("step1", "transactionVolume", "transactionVolume"),
    ("step1", "annualGCI", "annualGCI"),
    ("step1", "primaryMarket", "primaryMarket"),
)

_SHARED_LEADS = (
    ("step3", "leadSources", "leadSources"),
    ("step3", "responseSpeed", "leadResponseSpeed"),
    ("step3", "leadTracking", "leadTracking"),
    ("step3", "conversionRate", "conversionRate"),
    ("step3", "googleReviews", "googleReviews"),
    ("step3", "reviewAutomation", "reviewAutomation"),
)

HOME_SERVICES_CONTEXT = _HOME_SERVICES_PROFILE + (
    ("step2", "primaryCRM", "primaryCRM"),
    ("step2", "toolsUsed", "toolsUsed"),
) + _SHARED_LEADS + (
    ("step3", "missedCallHandling", "missedCallHandling"),
    ("step4", "schedulingMethod", "schedulingMethod"),
    ("step4", "dispatchMethod", "dispatchMethod"),
    ("step4", "routeOptimization", "routeOptimization"),
    ("step4", "capacityPlanning", "capacityPlanning"),
    ("step5", "internalComms", "internalComms"),
    ("step5", "afterHoursComms", "afterHoursComms"),
    ("step5", "clientPortal", "clientPortal"),
    ("step5", "appointmentReminders", "appointmentReminders"),
    ("step5", "onTheWayNotifications", "onTheWayNotifications"),
    ("step6", "repeatBusinessPercent", "repeatBusinessPercent"),
    ("step6", "postJobFollowUp", "postJobFollowUp"),
    ("step6", "serviceAgreements", "serviceAgreements"),
    ("step7", "kpisTracked", "kpisTracked"),
    ("step7", "performanceMeasurement", "performanceMeasurement"),
    ("step7", "jobCosting", "jobCosting"),
    ("step8", "paymentMethods", "paymentMethods"),
    ("step8", "financialReview", "financialReview"),
    ("step8", "estimateProcess", "estimateProcess"),
    ("step8", "pricingModel", "pricingModel"),
    ("step8", "invoiceTiming", "invoiceTiming"),
)

REAL_ESTATE_CONTEXT = _REAL_ESTATE_PROFILE + (
    ("step2", "primaryCRM", "primaryCRM"),
    ("step2", "toolsUsed", "toolsUsed"),
) + _SHARED_LEADS + (
    ("step3", "touchesIn7Days", "touchesIn7Days"),
    ("step3", "leadDistribution", "leadDistribution"),
    ("step4", "followUpPlan", "followUpPlan"),
    ("step4", "nurtureDuration", "nurtureDuration"),
    ("step4", "automatedDrip", "automatedDrip"),
    ("step4", "leadTemperatureTracking", "leadTemperatureTracking"),
    ("step4", "activityLogging", "activityLogging"),
    ("step5", "internalComms", "internalComms"),
    ("step5", "afterHoursComms", "afterHoursComms"),
    ("step5", "clientPortal", "clientPortal"),
    ("step5", "agentClientComms", "agentClientComms"),
    ("step5", "transactionUpdates", "transactionUpdates"),
    ("step5", "pastClientEngagement", "pastClientEngagement"),
    ("step6", "repeatBusinessPercent", "repeatBusinessPercent"),
    ("step6", "postCloseFollowUp", "postCloseFollowUp"),
    ("step6", "referralProcess", "referralProcess"),
    ("step6", "anniversaryTracking", "anniversaryTracking"),
    ("step7", "kpisTracked", "kpisTracked"),
    ("step7", "agentPerformanceMeasurement", "agentPerformanceMeasurement"),
    ("step7", "agentAccountability", "agentAccountability"),
    ("step7", "transactionWorkflow", "transactionWorkflow"),
    ("step8", "paymentMethods", "paymentMethods"),
    ("step8", "financialReview", "financialReview"),
    ("step8", "expenseTracking", "expenseTracking"),
    ("step8", "marketingBudget", "marketingBudget"),
)


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(v for v in (sanitize_option(i) for i in value) if v)
    return sanitize_option(str(value))


def build_business_context(submission: AuditSubmission) -> List[Tuple[str, str]]:
    """
    (key, value) pairs for the prompt, in questionnaire order.

    Unanswered fields are left out. Contact fields are never read here.
    """
    fields = HOME_SERVICES_CONTEXT if submission.is_home_services else REAL_ESTATE_CONTEXT
    context: List[Tuple[str, str]] = []

    for step, name, key in fields:
        value = submission.answer(step, name)
        if value in (None, "", [], ()):
            continue
        text = _format_value(value)
        if text:
            context.append((key, text))
        # CRM satisfaction sits right after the CRM name
        if name == "primaryCRM":
            rating = submission.answer("step2", "crmSatisfaction")
            if rating:
                context.append(("crmSatisfaction", f"{rating}/5"))

    return context


# =============================================================================
# PROMPT
# =============================================================================

@dataclass(frozen=True)
class ReportPrompt:
    system: str
    user: str
    counts: ItemCounts


def build_prompt(submission: AuditSubmission, scores: AuditScores) -> ReportPrompt:
    """System and user prompt for one report request."""
    counts = item_counts(scores.overall)
    system = SYSTEM_PROMPT_TEMPLATE.format(
        overall=scores.overall,
        gaps=counts.gaps,
        quick_wins=counts.quick_wins,
        strategic=counts.strategic_recommendations,
    )

    niche = "Home Services Business" if submission.is_home_services else "Real Estate Team"
    sub_niche = get_sub_niche_label(submission.sub_niche)
    weakest_first = sorted(scores.categories, key=lambda c: c.score)

    frustrations = sanitize_text(submission.answer("step2", "techFrustrations"))
    challenge = sanitize_text(submission.answer("step8", "biggestChallenge"))

    user = USER_PROMPT_TEMPLATE.format(
        business=sanitize_business_name(submission.business_name),
        niche=niche,
        sub_niche_line=f"Sub-Niche: {sub_niche}\n" if sub_niche else "",
        overall=scores.overall,
        category_lines="\n".join(f"  - {c.label}: {c.score}/100" for c in weakest_first),
        context_lines="\n".join(
            f"  - {key}: {value}" for key, value in build_business_context(submission)
        ),
        frustrations_line=f"Technology Frustrations: {frustrations}" if frustrations else "",
        challenge_line=f"Biggest Challenge: {challenge}" if challenge else "",
    )
    return ReportPrompt(system=system, user=user, counts=counts)
