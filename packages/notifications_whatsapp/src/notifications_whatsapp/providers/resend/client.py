"""
Resend Email Provider

Production provider for notification emails through the Resend HTTP API.
"""

import logging
from typing import Any

import httpx

from notifications_whatsapp.providers.base import (
    EmailProvider,
    ProviderError,
    ProviderResponse,
)

logger = logging.getLogger(__name__)

RESEND_API_BASE_URL = "https://api.resend.com"


class ResendEmailProvider(EmailProvider):
    """
    Resend API provider.

    One POST to /emails per message; Resend answers with the email id.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        base_url: str = RESEND_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self.transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _post_email(self, api_key: str, payload: dict[str, Any]) -> dict[str, Any]:
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {api_key}"}

        try:
            response = await client.post(f"{self.base_url}/emails", headers=headers, json=payload)
        except httpx.RequestError as e:
            logger.error(f"HTTP request failed: {e}")
            raise ProviderError(
                message=f"HTTP request failed: {e}",
                code="HTTP_ERROR",
                retryable=True,
            )

        try:
            response_data = response.json()
        except ValueError:
            response_data = {"raw": response.text}

        if response.status_code >= 400:
            body = response_data if isinstance(response_data, dict) else {}
            raise ProviderError(
                message=body.get("message", "Unknown error"),
                code=str(body.get("name", response.status_code)),
                details=response_data,
                retryable=response.status_code >= 500,
            )

        return response_data

    async def send_email(
        self,
        api_key: str,
        sender: str,
        to: list[str],
        subject: str,
        html: str,
    ) -> ProviderResponse:
        """Send an HTML email via the Resend API."""
        payload = {"from": sender, "to": to, "subject": subject, "html": html}

        try:
            response = await self._post_email(api_key, payload)
        except ProviderError as e:
            logger.error(f"Failed to send email: {e}", extra={"to": to})
            return ProviderResponse(
                success=False,
                error_code=e.code,
                error_message=str(e),
                raw_response=e.details,
            )

        email_id = response.get("id")
        logger.info("Sent email via Resend", extra={"to": to, "email_id": email_id})

        return ProviderResponse(success=True, message_id=email_id, raw_response=response)
