"""
Scoring Engine

Turns an AuditSubmission into AuditScores:

    sub-scores (normalizer) -> category scores (aggregator)
        -> weighted overall (composer, with the resolved weight profile)

Deterministic and total: no I/O, and no answer can make it raise.

Example Usage:
    from bizaudit.models import AuditSubmission
    from bizaudit.scoring.engine import compute_scores

    submission = AuditSubmission.from_form_state(form_state)
    scores = compute_scores(submission)
    print(f"Overall: {scores.overall}/100")
    for cat in scores.weakest(3):
        print(f"  {cat.label}: {cat.score}")
"""

import logging
from typing import Dict, List, Mapping, Optional

from bizaudit.models.scores import CATEGORY_IDS, AuditScores, CategoryScore
from bizaudit.models.submission import AuditSubmission

from .aggregator import aggregate_category, round_half_up
from .catalog import get_lookup
from .normalizer import resolve_code
from .questions import category_label, questions_for, single_select_questions
from .subniches import get_sub_niche
from .weights import WeightProfile, resolve_weights

logger = logging.getLogger(__name__)


# =============================================================================
# OVERALL SCORE COMPOSER
# =============================================================================

def compose_overall(category_scores: Mapping[str, int], weights: WeightProfile) -> int:
    """round(sum(score * weight)) over the seven categories."""
    total = sum(category_scores[c] * weights.weight_for(c) for c in CATEGORY_IDS)
    return round_half_up(total)


# =============================================================================
# ENGINE
# =============================================================================

def compute_category_scores(submission: AuditSubmission) -> Dict[str, int]:
    """Category id -> 0-100 score for every category."""
    plan = questions_for(submission.niche)
    return {
        category: aggregate_category([q.score(submission.answers) for q in plan[category]])
        for category in CATEGORY_IDS
    }


def compute_scores(submission: AuditSubmission) -> AuditScores:
    """Score a submission with its sub-vertical's weight profile."""
    sub_niche = submission.sub_niche
    info = get_sub_niche(sub_niche)
    if sub_niche and info is None:
        logger.debug(f"Unknown sub-niche {sub_niche!r}, using base weights")
    elif info is not None and info.niche is not submission.niche:
        # Mismatched sub-vertical: keep the vertical's questions, drop the override
        logger.debug(f"Sub-niche {sub_niche!r} is not a {submission.niche.value} sub-niche")
        sub_niche = None

    weights = resolve_weights(sub_niche)
    scores = compute_category_scores(submission)

    categories = tuple(
        CategoryScore(
            category=c,
            label=category_label(c, submission.niche),
            score=scores[c],
            weight=round_half_up(weights.weight_for(c) * 100),
        )
        for c in CATEGORY_IDS
    )
    return AuditScores(
        categories=categories,
        overall=compose_overall(scores, weights),
        weights=weights,
    )


# =============================================================================
# PRESENTATION HELPERS
# =============================================================================

def score_label(score: int) -> str:
    if score >= 75:
        return "Strong"
    if score >= 50:
        return "Moderate"
    if score >= 25:
        return "Needs Work"
    return "Critical Gap"


def benchmark(score: int) -> str:
    """Position against industry peers: above, average, or below."""
    if score >= 65:
        return "above"
    if score >= 40:
        return "average"
    return "below"


# =============================================================================
# DRIFT DETECTION
# =============================================================================

def find_unmapped_answers(submission: AuditSubmission) -> List[Dict[str, Optional[str]]]:
    """
    Answered single-select questions whose value the catalog does not know.

    These score the default sub-score silently; surfacing them makes drift
    between option copy and the scoring tables visible.
    """
    unmapped = []
    for question in single_select_questions(submission.niche):
        value = submission.answer(question.step, question.field)
        if not isinstance(value, str) or not value.strip():
            continue
        if resolve_code(get_lookup(question.table_id), value) is None:
            unmapped.append({
                "step": question.step,
                "field": question.field,
                "tableId": question.table_id,
                "value": value,
            })
    return unmapped
