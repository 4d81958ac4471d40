"""
Free-Text Sanitization

Cleans user-typed text before it reaches a prompt: HTML tags and emoji are
removed, only letters (any script), digits, whitespace and a small
punctuation set survive, and the result is length-capped.
"""

import re
from typing import Optional

HTML_TAG = re.compile(r"<[^>]*>")

# Pictographic blocks plus variation selectors and joiners that glue them together
EMOJI = re.compile(
    "["
    "\U0001F000-\U0001FAFF"
    "\U00002600-\U000027BF"
    "\U00002B00-\U00002BFF"
    "\U0000FE00-\U0000FE0F"
    "\U0000200D"
    "\U000020E3"
    "]+"
)

WHITESPACE = re.compile(r"\s+")

# \w covers letters and digits in every script, minus the underscore
TEXT_DISALLOWED = re.compile(r"[^\w\s.,!?'-]|_")
NAME_DISALLOWED = re.compile(r"[^\w\s.,&'-]|_")

DEFAULT_BUSINESS_NAME = "Your Business"


def _clean(value: str, disallowed: re.Pattern, max_len: int) -> str:
    value = HTML_TAG.sub("", value)
    value = EMOJI.sub("", value)
    value = disallowed.sub(" ", value)
    value = WHITESPACE.sub(" ", value).strip()
    return value[:max_len]


def sanitize_text(value: Optional[str], max_len: int = 500) -> str:
    """Sanitize a free-text answer (frustrations, biggest challenge)."""
    if not value:
        return ""
    return _clean(str(value), TEXT_DISALLOWED, max_len)


def sanitize_business_name(value: Optional[str]) -> str:
    """Sanitize a business name; '&' is kept, empty input gets a placeholder."""
    if not value:
        return DEFAULT_BUSINESS_NAME
    cleaned = _clean(str(value), NAME_DISALLOWED, 100)
    return cleaned or DEFAULT_BUSINESS_NAME


def sanitize_option(value: Optional[str], max_len: int = 200) -> str:
    """
    Light clean for a selected option value: tags and emoji go, punctuation stays.

    Option copy uses dashes, slashes and '+' that free-text rules would strip.
    """
    if not value:
        return ""
    value = HTML_TAG.sub("", str(value))
    value = EMOJI.sub("", value)
    return WHITESPACE.sub(" ", value).strip()[:max_len]
