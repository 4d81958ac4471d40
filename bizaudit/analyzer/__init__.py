"""
BizAudit - AI Report Analyzer

Prompt construction, the Claude client, and completion parsing.
"""

from .client import ClaudeClient, CompletionResponse, TokenUsage, create_claude_client
from .parser import parse_report, strip_code_fences
from .prompts import ItemCounts, ReportPrompt, build_business_context, build_prompt, item_counts

__all__ = [
    # Client
    "ClaudeClient",
    "CompletionResponse",
    "TokenUsage",
    "create_claude_client",

    # Parsing
    "parse_report",
    "strip_code_fences",

    # Prompts
    "ItemCounts",
    "ReportPrompt",
    "build_business_context",
    "build_prompt",
    "item_counts",
]
