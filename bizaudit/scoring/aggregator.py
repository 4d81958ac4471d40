"""
Category Aggregator

Combines 0-3 sub-scores into one 0-100 category score.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from .catalog import MAX_SUB_SCORE

# Unanswered category: neither a hard zero nor a perfect score
EMPTY_CATEGORY_SCORE = 50


def round_half_up(value: float) -> int:
    """Round .5 away from zero, matching the questionnaire's arithmetic."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def aggregate_category(sub_scores: Sequence[int], max_per_item: int = MAX_SUB_SCORE) -> int:
    """
    round(sum / (count * max) * 100), clamped to [0, 100].

    Args:
        sub_scores: Per-question sub-scores, each in [0, max_per_item]
        max_per_item: Highest sub-score one question can earn

    Returns:
        Category score; exactly 50 for an empty list
    """
    if not sub_scores:
        return EMPTY_CATEGORY_SCORE
    total = sum(sub_scores)
    ceiling = len(sub_scores) * max_per_item
    score = round_half_up(total / ceiling * 100)
    return max(0, min(100, score))
