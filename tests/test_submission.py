"""
Tests for AuditSubmission construction and validation.
"""

import pytest

from bizaudit.errors import ValidationError
from bizaudit.models import AuditSubmission, STEPS
from bizaudit.scoring import Niche


def _fields(exc_info) -> list:
    return [e["field"] for e in exc_info.value.errors]


@pytest.mark.unit
class TestFromFormState:

    def test_builds_submission(self, hs_submission):
        assert hs_submission.niche is Niche.HOME_SERVICES
        assert hs_submission.sub_niche == "hvac"
        assert hs_submission.partner_code == "PARTNER-7"
        assert hs_submission.language == "en"
        assert hs_submission.business_name == "Summit Heating & Air"

    def test_email_case_is_preserved(self, hs_submission):
        assert hs_submission.contact_email == "Dana@SummitHVAC.com"

    def test_language_argument_wins(self, hs_form_state):
        hs_form_state["language"] = "en"
        submission = AuditSubmission.from_form_state(hs_form_state, language="bg")
        assert submission.language == "bg"

    def test_missing_steps_become_empty(self, re_submission):
        assert set(re_submission.answers) == set(STEPS)
        assert re_submission.step("step6") == {}
        assert re_submission.answer("step6", "postJobFollowUp", "n/a") == "n/a"

    def test_answers_are_copied(self, hs_form_state):
        submission = AuditSubmission.from_form_state(hs_form_state)
        hs_form_state["step3"]["responseSpeed"] = "No consistent process"
        assert submission.answer("step3", "responseSpeed") == "Under 5 minutes"

    def test_to_form_state_keeps_questionnaire_shape(self, hs_submission, hs_form_state):
        data = hs_submission.to_form_state()
        assert data["niche"] == "home_services"
        assert data["subNiche"] == "hvac"
        assert data["step8"] == hs_form_state["step8"]


@pytest.mark.unit
class TestValidation:
    """Required answers are checked before scoring."""

    def test_valid_forms_pass(self, hs_form_state, re_form_state):
        AuditSubmission.from_form_state(hs_form_state)
        AuditSubmission.from_form_state(re_form_state)

    def test_unknown_niche(self, hs_form_state):
        hs_form_state["niche"] = "dentistry"
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state(hs_form_state)
        assert "niche" in _fields(exc_info)

    def test_sub_niche_from_other_vertical(self, hs_form_state):
        hs_form_state["subNiche"] = "residential_sales"
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state(hs_form_state)
        assert _fields(exc_info) == ["subNiche"]

    def test_unknown_sub_niche(self, hs_form_state):
        hs_form_state["subNiche"] = "underwater_welding"
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state(hs_form_state)
        assert _fields(exc_info) == ["subNiche"]

    def test_unsupported_language(self, hs_form_state):
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state(hs_form_state, language="fr")
        assert _fields(exc_info) == ["language"]

    def test_every_missing_field_is_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state({"niche": "real_estate"})
        assert _fields(exc_info) == [
            "step1.businessName",
            "step1.contactName",
            "step1.email",
            "step2.primaryCRM",
            "step2.crmSatisfaction",
            "step3.leadSources",
            "step3.responseSpeed",
        ]

    @pytest.mark.parametrize("email", ["dana", "dana@", "dana@example", "da na@example.com"])
    def test_malformed_email(self, hs_form_state, email):
        hs_form_state["step1"]["email"] = email
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state(hs_form_state)
        assert _fields(exc_info) == ["step1.email"]

    @pytest.mark.parametrize("rating", [0, 6, "4", True, None])
    def test_crm_rating_must_be_1_to_5(self, hs_form_state, rating):
        hs_form_state["step2"]["crmSatisfaction"] = rating
        with pytest.raises(ValidationError):
            AuditSubmission.from_form_state(hs_form_state)

    def test_blank_strings_count_as_missing(self, hs_form_state):
        hs_form_state["step1"]["businessName"] = "   "
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state(hs_form_state)
        assert _fields(exc_info) == ["step1.businessName"]

    def test_error_payload(self, hs_form_state):
        hs_form_state["step3"]["leadSources"] = []
        with pytest.raises(ValidationError) as exc_info:
            AuditSubmission.from_form_state(hs_form_state)
        payload = exc_info.value.to_dict()
        assert payload["error"] == "validation_error"
        assert payload["errors"] == [
            {"field": "step3.leadSources", "message": "Select at least one lead source"},
        ]

    def test_validation_can_be_skipped(self):
        submission = AuditSubmission.from_form_state({"niche": "nonsense"}, validate=False)
        assert submission.niche is Niche.HOME_SERVICES
        assert submission.business_name == ""
