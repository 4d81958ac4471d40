"""
Tests for the report prompt builder and free-text sanitization.
"""

import pytest

from bizaudit.analyzer.prompts import build_business_context, build_prompt, item_counts
from bizaudit.models import AuditSubmission
from bizaudit.utils.sanitize import sanitize_business_name, sanitize_option, sanitize_text


@pytest.mark.unit
class TestItemCounts:

    @pytest.mark.parametrize("overall,gaps,others", [
        (0, "4-5", "3"), (39, "4-5", "3"), (40, "3", "3"), (65, "3", "3"), (66, "2", "2"), (100, "2", "2"),
    ])
    def test_counts_by_overall(self, overall, gaps, others):
        counts = item_counts(overall)
        assert counts.gaps == gaps
        assert counts.quick_wins == others
        assert counts.strategic_recommendations == others


@pytest.mark.unit
class TestBuildPrompt:

    def test_contact_details_never_reach_the_prompt(self, hs_submission, hs_scores):
        prompt = build_prompt(hs_submission, hs_scores)
        for text in (prompt.system, prompt.user):
            assert "Dana Reyes" not in text
            assert "Dana@SummitHVAC.com" not in text
            assert "555-0100" not in text

    def test_user_prompt_content(self, hs_submission, hs_scores):
        user = build_prompt(hs_submission, hs_scores).user
        assert "Business: Summit Heating & Air" in user
        assert "Niche: Home Services Business" in user
        assert "Sub-Niche: HVAC" in user
        assert "Overall Score: 66/100" in user
        assert "  - primaryCRM: ServiceTitan" in user
        assert "  - crmSatisfaction: 4/5" in user

    def test_categories_listed_weakest_first(self, hs_submission, hs_scores):
        user = build_prompt(hs_submission, hs_scores).user
        lines = [line for line in user.splitlines() if line.endswith("/100") and line.startswith("  - ")]
        scores = [int(line.rsplit(": ", 1)[1].split("/")[0]) for line in lines]
        assert scores == sorted(scores)
        assert len(scores) == 7

    def test_item_counts_in_system_prompt(self, hs_submission, hs_scores, re_submission, re_scores):
        assert "Generate 2 gaps" in build_prompt(hs_submission, hs_scores).system
        prompt = build_prompt(re_submission, re_scores)
        assert "Generate 4-5 gaps" in prompt.system
        assert prompt.counts.gaps == "4-5"

    def test_free_text_is_sanitized(self, hs_submission, hs_scores):
        user = build_prompt(hs_submission, hs_scores).user
        assert "Technology Frustrations: Too many disconnected apps" in user
        assert "<b>" not in user
        assert "😩" not in user
        assert "Biggest Challenge: Keeping techs busy in the shoulder season." in user

    def test_unanswered_free_text_is_omitted(self, re_submission, re_scores):
        user = build_prompt(re_submission, re_scores).user
        assert "Technology Frustrations" not in user
        assert "Biggest Challenge" not in user
        assert "Niche: Real Estate Team" in user

    def test_system_prompt_forbids_vendors(self, hs_submission, hs_scores):
        system = build_prompt(hs_submission, hs_scores).system
        assert "Never recommend third-party tools" in system
        assert '"cta"' in system


@pytest.mark.unit
class TestBusinessContext:

    def test_unanswered_fields_are_left_out(self, re_submission):
        keys = [key for key, _ in build_business_context(re_submission)]
        assert keys == ["role", "teamSize", "primaryCRM", "crmSatisfaction", "leadSources", "leadResponseSpeed"]

    def test_multi_select_joined(self, hs_submission):
        context = dict(build_business_context(hs_submission))
        assert context["leadSources"] == "Google Ads, Referrals, Google Business Profile, Facebook"

    def test_option_values_are_cleaned(self, hs_form_state):
        hs_form_state["step1"]["industry"] = "<i>HVAC</i> 🔥 / Plumbing"
        context = dict(build_business_context(AuditSubmission.from_form_state(hs_form_state)))
        assert context["industry"] == "HVAC / Plumbing"


@pytest.mark.unit
class TestSanitize:

    def test_text_strips_tags_emoji_and_symbols(self):
        assert sanitize_text("<script>x</script> Need help!! 🚀 $$$ now") == "x Need help!! now"

    def test_text_keeps_other_scripts(self):
        assert sanitize_text("Нужда от по-добро планиране") == "Нужда от по-добро планиране"

    def test_text_is_length_capped(self):
        assert len(sanitize_text("a" * 900)) == 500

    def test_business_name_keeps_ampersand(self):
        assert sanitize_business_name("Smith & Sons <LLC>") == "Smith & Sons"

    @pytest.mark.parametrize("value", [None, "", "🔥🔥"])
    def test_business_name_placeholder(self, value):
        assert sanitize_business_name(value) == "Your Business"

    def test_option_keeps_punctuation(self):
        assert sanitize_option("Yes - 30–50% (approx.) + more") == "Yes - 30–50% (approx.) + more"
