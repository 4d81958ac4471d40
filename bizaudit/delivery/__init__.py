"""Audit notifications via Resend."""

from .email import EmailDelivery, EmailResult
from .notifications import NotificationConsumer, admin_subject, user_subject

__all__ = [
    "EmailDelivery",
    "EmailResult",
    "NotificationConsumer",
    "admin_subject",
    "user_subject",
]
