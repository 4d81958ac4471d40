"""
Scoring Module for BizAudit

Deterministic questionnaire scoring:

1. **Answer Normalizer** - one answer -> integer sub-score 0-3
   Single-selects resolve through the answer catalog (stable codes, display
   text tolerated); multi-selects score by selection count.

2. **Category Aggregator** - sub-scores -> 0-100 per category
   Empty categories score a neutral 50.

3. **Weight Resolver** - sub-vertical -> weight profile
   Base profile unless the sub-vertical's group carries an override.

4. **Overall Score Composer** - round(sum(score * weight))

The engine that ties these to an AuditSubmission lives in
bizaudit.scoring.engine (it depends on bizaudit.models, which depends on
this package).

Example Usage:
    from bizaudit.scoring import score_answer, get_lookup, resolve_weights

    score_answer("Under 5 minutes", get_lookup("response_speed"))   # 3
    resolve_weights("hvac").scheduling                             # 0.20
"""

from .catalog import (
    CATALOG_VERSION,
    DEFAULT_SUB_SCORE,
    MAX_SUB_SCORE,
    LOOKUPS,
    AnswerOption,
    ScoreLookup,
    catalog_labels,
    get_lookup,
)
from .normalizer import (
    KPI_BREAKPOINTS,
    LEAD_SOURCE_BREAKPOINTS,
    PAYMENT_METHOD_BREAKPOINTS,
    TOOLS_BREAKPOINTS,
    CountBreakpoints,
    check_catalog_completeness,
    normalize_display_text,
    resolve_code,
    score_answer,
    score_rating,
    score_selection,
)
from .aggregator import EMPTY_CATEGORY_SCORE, aggregate_category, round_half_up
from .weights import BASE_WEIGHTS, WEIGHT_OVERRIDES, WeightProfile, resolve_weights
from .subniches import (
    Niche,
    SubNicheGroup,
    SubNicheInfo,
    SubNicheOptions,
    SUB_NICHE_REGISTRY,
    get_sub_niche,
    get_sub_niche_group,
    get_sub_niche_label,
    get_sub_niche_options,
    get_sub_niches_for_niche,
)
from .questions import CATEGORY_LABELS, Question, category_label, questions_for

__all__ = [
    # Catalog
    "CATALOG_VERSION",
    "DEFAULT_SUB_SCORE",
    "MAX_SUB_SCORE",
    "LOOKUPS",
    "AnswerOption",
    "ScoreLookup",
    "catalog_labels",
    "get_lookup",
    # Normalizer
    "KPI_BREAKPOINTS",
    "LEAD_SOURCE_BREAKPOINTS",
    "PAYMENT_METHOD_BREAKPOINTS",
    "TOOLS_BREAKPOINTS",
    "CountBreakpoints",
    "check_catalog_completeness",
    "normalize_display_text",
    "resolve_code",
    "score_answer",
    "score_rating",
    "score_selection",
    # Aggregator
    "EMPTY_CATEGORY_SCORE",
    "aggregate_category",
    "round_half_up",
    # Weights
    "BASE_WEIGHTS",
    "WEIGHT_OVERRIDES",
    "WeightProfile",
    "resolve_weights",
    # Verticals
    "Niche",
    "SubNicheGroup",
    "SubNicheInfo",
    "SubNicheOptions",
    "SUB_NICHE_REGISTRY",
    "get_sub_niche",
    "get_sub_niche_group",
    "get_sub_niche_label",
    "get_sub_niche_options",
    "get_sub_niches_for_niche",
    # Questions
    "CATEGORY_LABELS",
    "Question",
    "category_label",
    "questions_for",
]
