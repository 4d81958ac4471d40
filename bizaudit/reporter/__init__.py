"""
Report Generation Module

Template (AI-free) reports and report-view resolution.
"""

from .template import TemplateReportGenerator, generate_template_report
from .view import resolve_report

__all__ = [
    "TemplateReportGenerator",
    "generate_template_report",
    "resolve_report",
]
