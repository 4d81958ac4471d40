"""
Audit Submission

A finalized questionnaire: vertical metadata plus per-step answers, kept in
the same camelCase shape the questionnaire posts (step1 ... step8). Answers
are immutable once submitted; only report status fields change afterwards,
and those live on the persisted row, not here.
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from bizaudit.errors import ValidationError
from bizaudit.scoring.subniches import Niche, get_sub_niche

STEPS = ("step1", "step2", "step3", "step4", "step5", "step6", "step7", "step8")

VALID_LANGUAGES = ("en", "bg")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Personally identifying answers; never sent to the AI provider
PII_FIELDS = ("contactName", "email", "phone")


@dataclass(frozen=True)
class AuditSubmission:
    """Finalized questionnaire answers for one business."""
    niche: Niche
    answers: Mapping[str, Mapping[str, Any]]
    sub_niche: Optional[str] = None
    partner_code: Optional[str] = None
    language: str = "en"

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def step(self, step: str) -> Mapping[str, Any]:
        return self.answers.get(step) or {}

    def answer(self, step: str, name: str, default: Any = None) -> Any:
        value = self.step(step).get(name)
        return default if value is None else value

    @property
    def is_home_services(self) -> bool:
        return self.niche is Niche.HOME_SERVICES

    @property
    def business_name(self) -> str:
        return (self.answer("step1", "businessName") or "").strip()

    @property
    def contact_name(self) -> str:
        return (self.answer("step1", "contactName") or "").strip()

    @property
    def contact_email(self) -> str:
        # Case preserved: quota identity is case-sensitive
        return (self.answer("step1", "email") or "").strip()

    @property
    def contact_phone(self) -> Optional[str]:
        return (self.answer("step1", "phone") or "").strip() or None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_form_state(self) -> Dict[str, Any]:
        """Raw answers in questionnaire shape, as stored with the audit."""
        data: Dict[str, Any] = {
            "niche": self.niche.value,
            "subNiche": self.sub_niche,
            "partnerCode": self.partner_code,
        }
        for step in STEPS:
            data[step] = copy.deepcopy(dict(self.step(step)))
        return data

    @classmethod
    def from_form_state(
        cls,
        data: Mapping[str, Any],
        language: Optional[str] = None,
        validate: bool = True,
    ) -> "AuditSubmission":
        """
        Build a submission from questionnaire form state.

        Raises:
            ValidationError: when validate is set and required answers are
                missing or malformed
        """
        language = language or data.get("language") or "en"
        if validate:
            validate_form_state(data, language)

        niche = Niche.parse(data.get("niche")) or Niche.HOME_SERVICES
        answers = {step: copy.deepcopy(dict(data.get(step) or {})) for step in STEPS}
        return cls(
            niche=niche,
            answers=answers,
            sub_niche=data.get("subNiche") or None,
            partner_code=data.get("partnerCode") or None,
            language=language,
        )


# =============================================================================
# VALIDATION
# =============================================================================

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_form_state(data: Mapping[str, Any], language: str = "en") -> None:
    """
    Reject a questionnaire that cannot be scored meaningfully.

    Raises:
        ValidationError: listing every offending field
    """
    errors: List[Dict[str, str]] = []

    def fail(name: str, message: str):
        errors.append({"field": name, "message": message})

    niche = Niche.parse(data.get("niche"))
    if niche is None:
        fail("niche", "Choose home_services or real_estate")

    sub_niche = data.get("subNiche")
    if sub_niche:
        info = get_sub_niche(sub_niche)
        if info is None:
            fail("subNiche", f"Unknown sub-niche: {sub_niche}")
        elif niche is not None and info.niche is not niche:
            fail("subNiche", f"{sub_niche} does not belong to {niche.value}")

    if language not in VALID_LANGUAGES:
        fail("language", f"Supported languages: {', '.join(VALID_LANGUAGES)}")

    step1 = data.get("step1") or {}
    step2 = data.get("step2") or {}
    step3 = data.get("step3") or {}

    if _is_blank(step1.get("businessName")):
        fail("step1.businessName", "Business name is required")
    if _is_blank(step1.get("contactName")):
        fail("step1.contactName", "Contact name is required")
    email = step1.get("email")
    if _is_blank(email):
        fail("step1.email", "Email is required")
    elif not EMAIL_PATTERN.match(str(email).strip()):
        fail("step1.email", "Email address is not valid")

    if _is_blank(step2.get("primaryCRM")):
        fail("step2.primaryCRM", "Primary CRM is required")
    satisfaction = step2.get("crmSatisfaction")
    if not isinstance(satisfaction, int) or isinstance(satisfaction, bool) or not 1 <= satisfaction <= 5:
        fail("step2.crmSatisfaction", "Rate CRM satisfaction from 1 to 5")

    lead_sources = step3.get("leadSources")
    if not isinstance(lead_sources, list) or not lead_sources:
        fail("step3.leadSources", "Select at least one lead source")
    if _is_blank(step3.get("responseSpeed")):
        fail("step3.responseSpeed", "Response speed is required")

    if errors:
        raise ValidationError(errors)
