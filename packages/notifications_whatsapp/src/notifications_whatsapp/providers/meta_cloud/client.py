"""
Meta Cloud API WhatsApp Provider

Production provider for WhatsApp Business Cloud API.
Sends text and template notifications through the Graph API v18.0.
"""

import logging
from typing import Any

import httpx

from notifications_whatsapp.providers.base import (
    ProviderError,
    ProviderResponse,
    WhatsAppProvider,
)

logger = logging.getLogger(__name__)

# Meta Graph API configuration
GRAPH_API_VERSION = "v18.0"
GRAPH_API_BASE_URL = f"https://graph.facebook.com/{GRAPH_API_VERSION}"


class MetaCloudWhatsAppProvider(WhatsAppProvider):
    """
    Meta Cloud API provider for WhatsApp Business.

    Uses the Graph API messages endpoint of the business phone number.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        base_url: str = GRAPH_API_BASE_URL,
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

    async def _post_message(
        self,
        phone_number_id: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """POST to the messages endpoint and return the decoded body."""
        client = await self._get_client()

        url = f"{self.base_url}/{phone_number_id}/messages"
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            response = await client.post(url, headers=headers, json=payload)
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
            error = response_data.get("error", {}) if isinstance(response_data, dict) else {}
            raise ProviderError(
                message=error.get("message", "Unknown error"),
                code=str(error.get("code", response.status_code)),
                details=response_data,
                retryable=response.status_code >= 500,
            )

        return response_data

    async def _send(
        self,
        phone_number_id: str,
        access_token: str,
        payload: dict[str, Any],
        log_extra: dict[str, Any],
    ) -> ProviderResponse:
        try:
            response = await self._post_message(phone_number_id, access_token, payload)
        except ProviderError as e:
            logger.error(f"Failed to send {payload['type']} message: {e}", extra=log_extra)
            return ProviderResponse(
                success=False,
                error_code=e.code,
                error_message=str(e),
                raw_response=e.details,
            )

        message_id = (response.get("messages") or [{}])[0].get("id")

        logger.info(
            f"Sent {payload['type']} message via Meta API",
            extra={**log_extra, "message_id": message_id},
        )

        return ProviderResponse(
            success=True,
            message_id=message_id,
            raw_response=response,
        )

    async def send_text(
        self,
        phone_number_id: str,
        access_token: str,
        to: str,
        text: str,
    ) -> ProviderResponse:
        """Send a text message via Graph API."""
        payload: dict[str, Any] = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text},
        }
        return await self._send(phone_number_id, access_token, payload, {"to": to})

    async def send_template(
        self,
        phone_number_id: str,
        access_token: str,
        to: str,
        template_name: str,
        language_code: str,
        components: list[dict[str, Any]] | None = None,
    ) -> ProviderResponse:
        """Send a template message via Graph API."""
        payload: dict[str, Any] = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "template",
            "template": {
                "name": template_name,
                "language": {"code": language_code},
            },
        }

        if components:
            payload["template"]["components"] = components

        return await self._send(
            phone_number_id,
            access_token,
            payload,
            {"to": to, "template": template_name},
        )
