"""
Email Delivery Module

Sends audit notifications via Resend. Plain text only.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import resend

from bizaudit.utils.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class EmailResult:
    """Result of email delivery."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class EmailDelivery:
    """
    Email delivery service using Resend.

    Disabled (every send returns a failed EmailResult) when no API key is
    configured.
    """

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key or settings.RESEND_API_KEY
        if not self.api_key:
            logger.warning("RESEND_API_KEY not set - email delivery disabled")

        self.from_email = from_email or settings.FROM_EMAIL

        if self.api_key:
            resend.api_key = self.api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send(self, to: List[str], subject: str, text: str) -> EmailResult:
        """
        Send one plain-text email.

        Returns:
            EmailResult indicating success/failure
        """
        if not self.enabled:
            return EmailResult(success=False, error="Email delivery not configured (missing API key)")

        params = {
            "from": self.from_email,
            "to": to,
            "subject": subject,
            "text": text,
        }

        try:
            # The Resend SDK is synchronous
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            logger.error(f"Email delivery failed ({subject!r}): {type(e).__name__}: {e}")
            return EmailResult(success=False, error=str(e))

        message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
        logger.info(f"Email sent ({subject!r}): {message_id or 'unknown'}")
        return EmailResult(success=True, message_id=message_id)
