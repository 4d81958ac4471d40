"""
Test Suite for the Scoring Engine

Tests the four scoring stages:
- Answer Normalizer (single-select, multi-select, rating)
- Category Aggregator
- Weight Resolver
- Overall Score Composer (and the engine that ties them together)
"""

import pytest

from bizaudit.models import AuditSubmission, CATEGORY_IDS
from bizaudit.scoring import (
    BASE_WEIGHTS,
    EMPTY_CATEGORY_SCORE,
    KPI_BREAKPOINTS,
    LEAD_SOURCE_BREAKPOINTS,
    LOOKUPS,
    WEIGHT_OVERRIDES,
    Niche,
    SubNicheGroup,
    TOOLS_BREAKPOINTS,
    WeightProfile,
    aggregate_category,
    check_catalog_completeness,
    get_lookup,
    normalize_display_text,
    resolve_weights,
    round_half_up,
    score_answer,
    score_rating,
    score_selection,
)
from bizaudit.scoring.engine import (
    benchmark,
    compose_overall,
    compute_scores,
    find_unmapped_answers,
    score_label,
)


@pytest.mark.unit
class TestAnswerNormalizer:
    """Single-select answers -> 0-3 via the catalog."""

    def test_fastest_response_speed_scores_three(self):
        assert score_answer("Under 5 minutes", get_lookup("response_speed")) == 3

    def test_slowest_response_speed_scores_zero(self):
        assert score_answer("Next business day or later", get_lookup("response_speed")) == 0

    def test_stable_code_scores_like_display_text(self):
        lookup = get_lookup("response_speed")
        assert score_answer("under_5_min", lookup) == score_answer("Under 5 minutes", lookup)

    def test_dash_style_and_case_are_ignored(self):
        """'5-30 minutes' and '5–30 MINUTES' both match '5–30 minutes'."""
        lookup = get_lookup("response_speed")
        assert score_answer("5-30 minutes", lookup) == 2
        assert score_answer("5–30 MINUTES", lookup) == 2
        assert score_answer("Yes — automated via software", get_lookup("automation")) == 3

    def test_curly_apostrophe_matches(self):
        assert score_answer("We don’t really track this", get_lookup("lead_tracking")) == 0

    def test_unmapped_answer_defaults_to_one(self):
        assert score_answer("Carrier pigeon", get_lookup("dispatch")) == 1

    @pytest.mark.parametrize("value", [None, "", "   ", 42, ["Under 5 minutes"], {"a": 1}])
    def test_missing_or_malformed_answer_defaults_to_one(self, value):
        assert score_answer(value, get_lookup("response_speed")) == 1

    def test_every_catalog_option_is_in_range(self):
        for table in LOOKUPS.values():
            for option in table.options:
                assert 0 <= option.score <= 3, f"{table.table_id}.{option.code}"

    def test_catalog_codes_are_unique_per_table(self):
        for table in LOOKUPS.values():
            assert len(set(table.codes)) == len(table.codes), table.table_id

    def test_normalize_display_text(self):
        assert normalize_display_text("  Yes  —  above 50% ") == "yes-above 50%"


@pytest.mark.unit
class TestMultiSelect:
    """Multi-select answers score by selection count only."""

    @pytest.mark.parametrize("count,expected", [(0, 0), (1, 0), (2, 1), (3, 2), (4, 3), (7, 3)])
    def test_lead_source_breakpoints(self, count, expected):
        selections = [f"Source {i}" for i in range(count)]
        assert score_selection(selections, LEAD_SOURCE_BREAKPOINTS) == expected

    def test_specific_values_do_not_matter(self):
        a = score_selection(["Google Ads", "Referrals", "Yelp"], LEAD_SOURCE_BREAKPOINTS)
        b = score_selection(["x", "y", "z"], LEAD_SOURCE_BREAKPOINTS)
        assert a == b == 2

    def test_none_scores_zero(self):
        assert score_selection(None, LEAD_SOURCE_BREAKPOINTS) == 0

    def test_blank_selections_are_not_counted(self):
        assert score_selection(["Referrals", "", "  "], LEAD_SOURCE_BREAKPOINTS) == 0

    def test_lone_string_is_one_selection(self):
        assert score_selection("QuickBooks", TOOLS_BREAKPOINTS) == 0
        assert score_selection("Referrals", LEAD_SOURCE_BREAKPOINTS) == 0
        assert score_selection("Revenue per technician", KPI_BREAKPOINTS) == 0

    def test_kpi_opt_out_zeroes_score(self):
        selections = ["Revenue", "Close rate", "Average ticket", "We don't track any KPIs"]
        assert score_selection(selections, KPI_BREAKPOINTS) == 0

    def test_kpi_breakpoints(self):
        assert score_selection([f"k{i}" for i in range(6)], KPI_BREAKPOINTS) == 3
        assert score_selection([f"k{i}" for i in range(4)], KPI_BREAKPOINTS) == 2
        assert score_selection([f"k{i}" for i in range(2)], KPI_BREAKPOINTS) == 1


@pytest.mark.unit
class TestRating:
    """CRM satisfaction 1-5 shifts to 0-3."""

    @pytest.mark.parametrize("rating,expected", [(1, 0), (2, 1), (3, 2), (4, 3), (5, 3)])
    def test_rating_scale(self, rating, expected):
        assert score_rating(rating) == expected

    @pytest.mark.parametrize("rating", [None, "great", 0, -2])
    def test_unusable_rating_defaults_to_one(self, rating):
        assert score_rating(rating) == 1


@pytest.mark.unit
class TestCategoryAggregator:
    """Sub-scores -> 0-100 category score."""

    def test_empty_category_is_neutral(self):
        assert aggregate_category([]) == EMPTY_CATEGORY_SCORE == 50

    def test_perfect_and_zero(self):
        assert aggregate_category([3, 3, 3]) == 100
        assert aggregate_category([0, 0]) == 0

    def test_rounding(self):
        # 4 / 9 = 44.4%
        assert aggregate_category([1, 1, 2]) == 44
        # 12 / 18 = 66.7%
        assert aggregate_category([3, 3, 1, 3, 1, 1]) == 67

    def test_half_rounds_up(self):
        # 1 / 8 = 12.5%
        assert aggregate_category([1], max_per_item=8) == 13
        assert round_half_up(64.5) == 65
        assert round_half_up(0.5) == 1

    def test_result_is_clamped(self):
        assert aggregate_category([5, 5], max_per_item=3) == 100

    def test_every_combination_in_range(self):
        for a in range(4):
            for b in range(4):
                for c in range(4):
                    assert 0 <= aggregate_category([a, b, c]) <= 100


@pytest.mark.unit
class TestWeightResolver:
    """Base profile vs sub-vertical overrides."""

    def test_all_profiles_sum_to_one(self):
        for profile in [BASE_WEIGHTS, *WEIGHT_OVERRIDES.values()]:
            assert abs(profile.total - 1.0) <= 0.001

    def test_no_sub_niche_uses_base(self):
        assert resolve_weights(None) == BASE_WEIGHTS
        assert BASE_WEIGHTS.to_dict() == {
            "technology": 0.10, "leads": 0.20, "scheduling": 0.15,
            "communication": 0.10, "followUp": 0.15, "operations": 0.15, "financial": 0.15,
        }

    def test_reactive_sub_niche_profile(self):
        weights = resolve_weights("hvac")
        assert weights.to_dict() == {
            "technology": 0.10, "leads": 0.20, "scheduling": 0.20,
            "communication": 0.10, "followUp": 0.10, "operations": 0.15, "financial": 0.15,
        }

    def test_group_members_share_profile(self):
        assert resolve_weights("plumbing") == resolve_weights("garage_doors") == WEIGHT_OVERRIDES[SubNicheGroup.REACTIVE]
        assert resolve_weights("roofing") == WEIGHT_OVERRIDES[SubNicheGroup.PROJECT_BASED]

    def test_unlisted_group_falls_back_to_base(self):
        assert resolve_weights("residential_sales") == BASE_WEIGHTS

    def test_unknown_sub_niche_falls_back_to_base(self):
        assert resolve_weights("underwater_welding") == BASE_WEIGHTS

    def test_profile_not_summing_to_one_is_rejected(self):
        with pytest.raises(ValueError):
            WeightProfile(
                technology=0.5, leads=0.5, scheduling=0.1,
                communication=0.0, followUp=0.0, operations=0.0, financial=0.0,
            )


@pytest.mark.unit
class TestScoringEngine:
    """Submission -> AuditScores."""

    def test_home_services_category_scores(self, hs_scores, hs_expected_category_scores):
        actual = {c.category: c.score for c in hs_scores.categories}
        assert actual == hs_expected_category_scores

    def test_overall_uses_sub_niche_weights(self, hs_scores):
        # 8.3 + 17.2 + 13.4 + 7.8 + 3.9 + 4.95 + 10.05 = 65.6
        assert hs_scores.overall == 66
        assert hs_scores.weights == resolve_weights("hvac")

    def test_overall_is_weighted_sum_of_categories(self, hs_scores, re_scores):
        for scores in (hs_scores, re_scores):
            category_scores = {c.category: c.score for c in scores.categories}
            assert scores.overall == compose_overall(category_scores, scores.weights)

    def test_category_weights_are_percentages(self, hs_scores):
        weights = {c.category: c.weight for c in hs_scores.categories}
        assert weights["scheduling"] == 20
        assert weights["followUp"] == 10
        assert sum(weights.values()) == 100

    def test_category_labels(self, hs_scores, re_scores):
        assert hs_scores.categories[2].label == "Scheduling & Dispatch"
        assert re_scores.categories[2].label == "Lead Management"
        assert [c.category for c in hs_scores.categories] == list(CATEGORY_IDS)

    def test_sparse_real_estate_submission(self, re_scores):
        """Unanswered single-selects score 1 each; empty multi-selects score 0."""
        actual = {c.category: c.score for c in re_scores.categories}
        assert actual == {
            "technology": 17,
            "leads": 29,
            "scheduling": 33,
            "communication": 33,
            "followUp": 33,
            "operations": 27,
            "financial": 28,
        }
        assert re_scores.overall == 29

    def test_mismatched_sub_niche_drops_override(self, hs_form_state):
        hs_form_state["subNiche"] = "residential_sales"
        submission = AuditSubmission.from_form_state(hs_form_state, validate=False)
        scores = compute_scores(submission)
        assert scores.weights == BASE_WEIGHTS
        # 8.3 + 17.2 + 10.05 + 7.8 + 5.85 + 4.95 + 10.05 = 64.2
        assert scores.overall == 64

    def test_unknown_sub_niche_uses_base(self, hs_form_state):
        hs_form_state["subNiche"] = "underwater_welding"
        submission = AuditSubmission.from_form_state(hs_form_state, validate=False)
        assert compute_scores(submission).weights == BASE_WEIGHTS

    def test_empty_submission_never_raises(self):
        for niche in Niche:
            scores = compute_scores(AuditSubmission(niche=niche, answers={}))
            assert len(scores.categories) == 7
            assert all(0 <= c.score <= 100 for c in scores.categories)
            assert 0 <= scores.overall <= 100

    def test_garbage_answers_never_raise(self, hs_form_state):
        hs_form_state["step3"]["responseSpeed"] = ["not", "a", "string"]
        hs_form_state["step3"]["leadSources"] = "Referrals"
        hs_form_state["step2"]["crmSatisfaction"] = "very"
        hs_form_state["step4"] = None
        submission = AuditSubmission.from_form_state(hs_form_state, validate=False)
        scores = compute_scores(submission)
        assert 0 <= scores.overall <= 100

    def test_tools_sent_as_plain_string(self, hs_form_state):
        hs_form_state["step2"]["toolsUsed"] = "QuickBooks"
        scores = compute_scores(AuditSubmission.from_form_state(hs_form_state))
        # CRM rating 4 -> 3, one tool -> 0: 3 of 6
        technology = {c.category: c.score for c in scores.categories}["technology"]
        assert technology == 50

    def test_weakest_categories_first(self, hs_scores):
        weakest = [c.category for c in hs_scores.weakest(3)]
        # scheduling and financial tie at 67; category order breaks the tie
        assert weakest == ["operations", "followUp", "scheduling"]
        assert hs_scores.strongest().category == "leads"


@pytest.mark.unit
class TestDriftDetection:
    """Surfacing answers the catalog does not know."""

    def test_fully_mapped_submission(self, hs_submission):
        assert find_unmapped_answers(hs_submission) == []

    def test_unmapped_answer_is_reported(self, hs_form_state):
        hs_form_state["step4"]["dispatchMethod"] = "Carrier pigeon"
        submission = AuditSubmission.from_form_state(hs_form_state)
        assert find_unmapped_answers(submission) == [{
            "step": "step4",
            "field": "dispatchMethod",
            "tableId": "dispatch",
            "value": "Carrier pigeon",
        }]

    def test_catalog_completeness_check(self):
        gaps = check_catalog_completeness({
            "response_speed": ["Under 5 minutes", "Instantly"],
            "dispatch": ["Automated through software"],
            "no_such_table": ["Anything"],
        })
        assert gaps == {
            "response_speed": ["Instantly"],
            "no_such_table": ["Anything"],
        }


@pytest.mark.unit
class TestPresentationHelpers:

    @pytest.mark.parametrize("score,label", [
        (100, "Strong"), (75, "Strong"), (74, "Moderate"), (50, "Moderate"),
        (49, "Needs Work"), (25, "Needs Work"), (24, "Critical Gap"), (0, "Critical Gap"),
    ])
    def test_score_label(self, score, label):
        assert score_label(score) == label

    @pytest.mark.parametrize("score,position", [(65, "above"), (64, "average"), (40, "average"), (39, "below")])
    def test_benchmark(self, score, position):
        assert benchmark(score) == position
