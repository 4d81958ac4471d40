"""Shared utilities: settings and free-text sanitization."""

from .config import Settings, get_settings
from .sanitize import sanitize_text, sanitize_business_name, sanitize_option

__all__ = [
    "Settings",
    "get_settings",
    "sanitize_text",
    "sanitize_business_name",
    "sanitize_option",
]
