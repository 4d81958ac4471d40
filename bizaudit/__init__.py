"""
BizAudit Report Engine

Scores business-operations questionnaires and produces narrative audit reports:
1. Normalizes categorical answers into a weighted 0-100 score per category
2. Records each finalized audit under a client-issued id
3. Guards AI augmentation with per-contact and per-origin quotas
4. Generates a personalized report with Claude, or a template report without it
5. Exposes a polling read path for reloads and shared links
"""

__version__ = "0.4.0"
