"""
WhatsApp Notification Sender

Sends a user notification over WhatsApp:
1. Validates phone and message
2. Logs the message instead of sending when WhatsApp isn't configured
3. Sends a template (when a template name is given) or a plain text message
4. Reports delivery so the notification row can be marked as sent
"""

import logging
import re
from typing import Any, Callable

from notifications_whatsapp.providers.base import ProviderError, WhatsAppProvider

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE_CODE = "es"
NOT_CONFIGURED_MESSAGE = "WhatsApp not configured - message logged"

_PHONE_STRIP = re.compile(r"[+\s-]")


class NotificationValidationError(ValueError):
    """Raised when a notification request is missing required fields."""


def format_phone(phone: str) -> str:
    """Remove '+', spaces and dashes; the Graph API wants digits only."""
    return _PHONE_STRIP.sub("", phone)


def build_template_components(template_params: dict[str, str] | None) -> list[dict[str, Any]] | None:
    """Body parameters in the order the params were given."""
    if not template_params:
        return None
    return [
        {
            "type": "body",
            "parameters": [{"type": "text", "text": value} for value in template_params.values()],
        }
    ]


class NotificationSender:
    """
    Sends notifications through a WhatsApp provider.

    With no provider configured, messages are logged and reported as
    successful so callers don't need a WhatsApp account in development.
    """

    def __init__(
        self,
        provider: WhatsAppProvider | None,
        phone_number_id: str | None = None,
        access_token: str | None = None,
        language_code: str = DEFAULT_LANGUAGE_CODE,
        mark_sent: Callable[[Any], None] | None = None,
    ):
        self.provider = provider
        self.phone_number_id = phone_number_id
        self.access_token = access_token
        self.language_code = language_code
        self.mark_sent = mark_sent

    @property
    def configured(self) -> bool:
        return bool(self.provider and self.phone_number_id and self.access_token)

    @classmethod
    def from_settings(cls, settings: Any, mark_sent: Callable[[Any], None] | None = None) -> "NotificationSender":
        """Meta Cloud sender when credentials are set, logging-only sender otherwise."""
        provider = None
        if settings.whatsapp_configured:
            from notifications_whatsapp.providers.meta_cloud import MetaCloudWhatsAppProvider
            provider = MetaCloudWhatsAppProvider()

        return cls(
            provider=provider,
            phone_number_id=settings.WHATSAPP_PHONE_ID,
            access_token=settings.WHATSAPP_API_KEY,
            language_code=settings.WHATSAPP_TEMPLATE_LANGUAGE,
            mark_sent=mark_sent,
        )

    async def send(
        self,
        phone: str | None,
        message: str | None,
        template_name: str | None = None,
        template_params: dict[str, str] | None = None,
        notification_id: Any = None,
    ) -> dict[str, Any]:
        """
        Send one notification.

        Raises:
            NotificationValidationError: phone or message missing
            ProviderError: the WhatsApp API rejected the message
        """
        if not phone or not message:
            raise NotificationValidationError("Missing required fields: phone, message")

        if not self.configured:
            logger.info(
                "WhatsApp not configured - logging message instead",
                extra={"to": phone, "text": message},
            )
            return {
                "success": True,
                "message": NOT_CONFIGURED_MESSAGE,
                "logged": {"phone": phone, "message": message},
            }

        to = format_phone(phone)

        if template_name:
            response = await self.provider.send_template(
                phone_number_id=self.phone_number_id,
                access_token=self.access_token,
                to=to,
                template_name=template_name,
                language_code=self.language_code,
                components=build_template_components(template_params),
            )
        else:
            response = await self.provider.send_text(
                phone_number_id=self.phone_number_id,
                access_token=self.access_token,
                to=to,
                text=message,
            )

        if not response.success:
            raise ProviderError(
                message=f"WhatsApp API error: {response.error_message}",
                code=response.error_code,
                details=response.raw_response,
            )

        logger.info(
            "WhatsApp notification sent",
            extra={"to": to, "message_id": response.message_id, "notification_id": str(notification_id or "")},
        )

        if notification_id and self.mark_sent:
            self.mark_sent(notification_id)

        return {"success": True, "data": response.raw_response}

    async def close(self) -> None:
        if self.provider:
            await self.provider.close()
