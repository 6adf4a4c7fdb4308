"""Email notifier backed by the Resend HTTP API.

Without a RESEND_API_KEY the message is logged instead of sent and the
send reports False.
"""

import logging

import httpx

from hirepath.core.config import settings
from hirepath.models.candidate import CandidateProfile
from hirepath.notifications.templates import (
    EmailContent,
    offer_email,
    reach_out_email,
    rejection_email,
)

logger = logging.getLogger(__name__)

_RESEND_API_URL = "https://api.resend.com/emails"
_RESEND_TIMEOUT = 10.0


class ResendNotifier:
    """Notifier that delivers plain-text email through Resend."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def send_offer_email(self, candidate: CandidateProfile) -> bool:
        content = offer_email(candidate, f"{settings.frontend_url}/login")
        return await self._send(candidate, content, template="offer")

    async def send_rejection_email(self, candidate: CandidateProfile) -> bool:
        return await self._send(candidate, rejection_email(candidate), template="rejection")

    async def send_reach_out_email(self, candidate: CandidateProfile) -> bool:
        content = reach_out_email(
            candidate, f"{settings.frontend_url}/schedule-interview"
        )
        return await self._send(candidate, content, template="reach_out")

    async def _send(
        self, candidate: CandidateProfile, content: EmailContent, *, template: str
    ) -> bool:
        """POST one email to Resend.

        Args:
            candidate: Recipient candidate.
            content: Rendered subject and body.
            template: Template name for logging.

        Returns:
            True if Resend accepted the message, False otherwise.
        """
        if not candidate.email:
            logger.info("Skipping %s email: candidate %s has no email", template, candidate.id)
            return False

        if not settings.email_enabled:
            logger.info(
                "Email delivery not configured; %s email for candidate %s logged only: %s",
                template,
                candidate.id,
                content.subject,
            )
            return False

        payload = {
            "from": settings.email_from,
            "to": candidate.email,
            "subject": content.subject,
            "text": content.text,
        }
        headers = {
            "Authorization": f"Bearer {settings.resend_api_key.get_secret_value()}",
        }
        try:
            if self._client is not None:
                resp = await self._client.post(
                    _RESEND_API_URL, headers=headers, json=payload, timeout=_RESEND_TIMEOUT
                )
            else:
                async with httpx.AsyncClient() as client:
                    resp = await client.post(
                        _RESEND_API_URL,
                        headers=headers,
                        json=payload,
                        timeout=_RESEND_TIMEOUT,
                    )
            resp.raise_for_status()
        except Exception:
            logger.warning(
                "Failed to send %s email for candidate %s",
                template,
                candidate.id,
                exc_info=True,
            )
            return False
        return True
