"""
Stub Providers

Development providers that log all operations without making real API calls.
Useful for local development and testing.
"""

import logging
from typing import Any
from uuid import uuid4

from notifications_whatsapp.providers.base import EmailProvider, ProviderResponse, WhatsAppProvider

logger = logging.getLogger(__name__)


class StubWhatsAppProvider(WhatsAppProvider):
    """
    Stub provider for development and testing.

    - Records all outbound messages in sent_messages
    - Generates fake message IDs
    - Can be told to fail every send
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent_messages: list[dict[str, Any]] = []

    def _record(self, message_type: str, prefix: str, **data: Any) -> ProviderResponse:
        message_id = f"{prefix}_{uuid4().hex[:16]}"
        self.sent_messages.append({"type": message_type, "message_id": message_id, **data})

        logger.info(
            f"[STUB] Sending {message_type} message",
            extra={"to": data.get("to"), "message_id": message_id},
        )

        if self.fail:
            return ProviderResponse(
                success=False,
                error_code="STUB_SIMULATED_FAILURE",
                error_message="Simulated failure for testing",
            )

        return ProviderResponse(
            success=True,
            message_id=message_id,
            raw_response={"stub": True, "message_id": message_id},
        )

    async def send_text(
        self,
        phone_number_id: str,
        access_token: str,
        to: str,
        text: str,
    ) -> ProviderResponse:
        """Log and return success for text message."""
        return self._record("text", "stub_msg", phone_number_id=phone_number_id, to=to, text=text)

    async def send_template(
        self,
        phone_number_id: str,
        access_token: str,
        to: str,
        template_name: str,
        language_code: str,
        components: list[dict[str, Any]] | None = None,
    ) -> ProviderResponse:
        """Log and return success for template message."""
        return self._record(
            "template",
            "stub_tmpl",
            phone_number_id=phone_number_id,
            to=to,
            template_name=template_name,
            language_code=language_code,
            components=components,
        )


class StubEmailProvider(EmailProvider):
    """Stub email provider; records emails in sent_emails."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent_emails: list[dict[str, Any]] = []

    async def send_email(
        self,
        api_key: str,
        sender: str,
        to: list[str],
        subject: str,
        html: str,
    ) -> ProviderResponse:
        email_id = f"stub_email_{uuid4().hex[:16]}"
        self.sent_emails.append({"id": email_id, "from": sender, "to": to, "subject": subject, "html": html})

        logger.info("[STUB] Sending email", extra={"to": to, "email_id": email_id})

        if self.fail:
            return ProviderResponse(
                success=False,
                error_code="STUB_SIMULATED_FAILURE",
                error_message="Simulated failure for testing",
            )

        return ProviderResponse(success=True, message_id=email_id, raw_response={"id": email_id})
