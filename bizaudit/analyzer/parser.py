"""
Report Response Parser

Turns raw completion text into AIReportData. Every way the text can be
unusable ends in TransientProviderError so the caller can offer Retry or
Skip; nothing here lets a JSON error escape.
"""

import json
import logging
import re
from typing import Any, Dict

from bizaudit.errors import TransientProviderError
from bizaudit.models.report import SOURCE_AI, AIReportData

logger = logging.getLogger(__name__)

FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?")
FENCE_CLOSE = re.compile(r"\n?```\s*$")
NEWLINES = re.compile(r"\r?\n")
WHITESPACE = re.compile(r"\s+")

REPORT_LISTS = ("gaps", "quickWins", "strategicRecommendations")

# Reasons carried on TransientProviderError
TRUNCATED = "truncated"
INVALID_JSON = "invalid_json"
INVALID_SHAPE = "invalid_shape"
EMPTY_REPORT = "empty_report"


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    text = FENCE_OPEN.sub("", text.strip())
    return FENCE_CLOSE.sub("", text).strip()


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        # Models sometimes break string values across lines; one repair pass
        collapsed = WHITESPACE.sub(" ", NEWLINES.sub(" ", text))
        try:
            return json.loads(collapsed)
        except json.JSONDecodeError as e:
            raise TransientProviderError(INVALID_JSON, str(e)) from e


def _validate_shape(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TransientProviderError(INVALID_SHAPE, f"expected object, got {type(data).__name__}")
    for key in REPORT_LISTS:
        value = data.get(key, [])
        if not isinstance(value, list):
            raise TransientProviderError(INVALID_SHAPE, f"{key} is not a list")
    return data


def parse_report(text: str, stop_reason: str = "end_turn") -> AIReportData:
    """
    Parse a completion into a report.

    Args:
        text: Raw completion text
        stop_reason: Provider stop reason; "max_tokens" means truncated

    Raises:
        TransientProviderError: truncated, unparseable, wrongly shaped, or
            empty output
    """
    if stop_reason == "max_tokens":
        raise TransientProviderError(TRUNCATED, "completion hit the token limit")

    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise TransientProviderError(INVALID_JSON, "empty completion")

    data = _validate_shape(_loads(cleaned))
    report = AIReportData.from_dict(data, source=SOURCE_AI)

    if report.is_empty:
        raise TransientProviderError(EMPTY_REPORT, "no gaps, quick wins or recommendations")

    logger.debug(
        f"Parsed report: {len(report.gaps)} gaps, {len(report.quick_wins)} quick wins, "
        f"{len(report.strategic_recommendations)} recommendations"
    )
    return report
