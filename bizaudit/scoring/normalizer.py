"""
Answer Normalizer

Maps one answer to an integer sub-score in [0, 3]:

- Single-select answers resolve to a stable code (exact code, or display text
  matched after normalisation) and take that option's score. Anything the
  table does not know scores DEFAULT_SUB_SCORE rather than failing.
- Multi-select answers score purely by selection count against breakpoints.
- The 1-5 CRM satisfaction rating shifts down by one and clamps to 0-3.

Never raises.
"""

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .catalog import DEFAULT_SUB_SCORE, LOOKUPS, MAX_SUB_SCORE, ScoreLookup

logger = logging.getLogger(__name__)


# =============================================================================
# DISPLAY TEXT NORMALISATION
# =============================================================================

_DASHES = re.compile(r"\s*[-‐‑‒–—―−]\s*")
_QUOTES = re.compile(r"[‘’ʼ`]")
_SPACES = re.compile(r"\s+")


def normalize_display_text(text: str) -> str:
    """
    Canonical form used to match display text against the catalog.

    Case, dash style ("-", "–", "—"), curly apostrophes and spacing are all
    ignored, so "Yes — above 50%" matches "Yes - above 50%".
    """
    text = _QUOTES.sub("'", text.strip())
    text = _DASHES.sub("-", text)
    return _SPACES.sub(" ", text).casefold()


@lru_cache(maxsize=None)
def _text_index(table_id: str) -> Dict[str, str]:
    table = LOOKUPS[table_id]
    return {normalize_display_text(o.label): o.code for o in table.options}


def resolve_code(lookup: ScoreLookup, value: Any) -> Optional[str]:
    """Resolve an answer (code or display text) to its stable code."""
    if value is None or not isinstance(value, str) or not value.strip():
        return None
    if lookup.by_code(value) is not None:
        return value
    return _text_index(lookup.table_id).get(normalize_display_text(value))


def score_answer(value: Any, lookup: ScoreLookup) -> int:
    """Sub-score for one single-select answer; unmapped values score 1."""
    code = resolve_code(lookup, value)
    if code is None:
        if value:
            logger.debug(f"Unmapped answer for {lookup.table_id}: {value!r}")
        return DEFAULT_SUB_SCORE
    return lookup.by_code(code).score


# =============================================================================
# MULTI-SELECT
# =============================================================================

@dataclass(frozen=True)
class CountBreakpoints:
    """
    Selection-count thresholds, highest first: ((min_count, score), ...).

    Any selection matching an opt-out marker zeroes the sub-score.
    """
    thresholds: Tuple[Tuple[int, int], ...]
    opt_out_markers: Tuple[str, ...] = field(default_factory=tuple)

    def score(self, selections: Optional[Sequence[Any]]) -> int:
        if isinstance(selections, str):
            # A lone string is one selection, not a sequence of characters
            selections = [selections]
        items = [s for s in (selections or []) if isinstance(s, str) and s.strip()]
        if self.opt_out_markers and any(self._is_opt_out(s) for s in items):
            return 0
        for min_count, sub_score in self.thresholds:
            if len(items) >= min_count:
                return sub_score
        return 0

    def _is_opt_out(self, selection: str) -> bool:
        text = normalize_display_text(selection)
        return any(marker in text for marker in self.opt_out_markers)


LEAD_SOURCE_BREAKPOINTS = CountBreakpoints(((4, 3), (3, 2), (2, 1)))
PAYMENT_METHOD_BREAKPOINTS = CountBreakpoints(((4, 3), (3, 2), (2, 1)))
TOOLS_BREAKPOINTS = CountBreakpoints(((8, 3), (5, 2), (2, 1)))
KPI_BREAKPOINTS = CountBreakpoints(
    ((6, 3), (4, 2), (2, 1)),
    opt_out_markers=("don't track", "no_kpis", "не проследяваме"),
)


def score_selection(selections: Optional[Sequence[Any]], breakpoints: CountBreakpoints) -> int:
    """Sub-score for a multi-select answer."""
    return breakpoints.score(selections)


# =============================================================================
# RATING
# =============================================================================

def score_rating(value: Any) -> int:
    """CRM satisfaction 1-5 -> 0-3. Missing or non-numeric ratings score 1."""
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return DEFAULT_SUB_SCORE
    if rating <= 0:
        return DEFAULT_SUB_SCORE
    return max(0, min(MAX_SUB_SCORE, rating - 1))


# =============================================================================
# COMPLETENESS CHECK
# =============================================================================

def check_catalog_completeness(option_lists: Mapping[str, Iterable[str]]) -> Dict[str, List[str]]:
    """
    Report display options that have no table entry.

    Args:
        option_lists: table_id -> option texts a UI currently offers

    Returns:
        table_id -> unmatched option texts (only tables with gaps). Unknown
        table ids report every option.
    """
    gaps: Dict[str, List[str]] = {}
    for table_id, options in option_lists.items():
        table = LOOKUPS.get(table_id)
        missing = [
            option for option in options
            if table is None or resolve_code(table, option) is None
        ]
        if missing:
            gaps[table_id] = missing
    return gaps
