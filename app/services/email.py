"""Email client - sends transactional mail through an HTTP relay."""

import logging
import uuid
from typing import Any

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)


class EmailClient:
    """Client for the outbound email relay."""

    def __init__(self, mock_mode: bool | None = None):
        """Initialize email client.

        Args:
            mock_mode: If True, log instead of calling the relay. Defaults to
                True when no relay URL is configured.
        """
        settings = get_settings()
        self.relay_url = settings.email_relay_url
        self.api_key = settings.email_relay_api_key
        self.from_address = settings.email_from_address
        self.mock_mode = not self.relay_url if mock_mode is None else mock_mode
        self.client = httpx.AsyncClient(timeout=30.0)

    async def send_email(self, to: str, subject: str, html: str) -> dict[str, Any]:
        """Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body

        Returns:
            Relay response (or mock response)
        """
        if self.mock_mode:
            logger.info(f"[MOCK] Sending email to {to}: {subject}")
            return {"id": f"mock_email_{uuid.uuid4().hex}", "status": "queued", "to": to}

        payload = {"from": self.from_address, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

        try:
            response = await self.client.post(self.relay_url, json=payload, headers=headers)
            response.raise_for_status()
            result = response.json()
            logger.info(f"Sent email to {to} (id: {result.get('id')})")
            return result
        except httpx.HTTPError as e:
            logger.error(f"Failed to send email to {to}: {e}")
            if hasattr(e, "response") and e.response is not None:
                logger.error(f"   Response: {e.response.text}")
            raise

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
