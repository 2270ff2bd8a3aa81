"""
Email Notification Sender

Sends a user notification by email:
1. Validates recipient, subject, title and message
2. Renders the branded HTML body, with an optional call-to-action button
3. Logs the email instead of sending when no API key is configured
4. Reports delivery so the notification row can be marked as sent
"""

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from jinja2 import Environment, PackageLoader, select_autoescape

from notifications_whatsapp.providers.base import EmailProvider, ProviderError
from notifications_whatsapp.service.sender import NotificationValidationError

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "Silver Market <notifications@resend.dev>"
DEFAULT_BRAND_NAME = "Silver Market Haiti"
NOT_CONFIGURED_MESSAGE = "Email not configured - message logged"
TEMPLATE_NAME = "email/notification.html"


@functools.lru_cache()
def _template_env() -> Environment:
    return Environment(
        loader=PackageLoader("notifications_whatsapp", "templates"),
        autoescape=select_autoescape(["html"]),
    )


def render_notification_email(
    subject: str,
    title: str,
    message: str,
    cta_url: str | None = None,
    cta_text: str | None = None,
    brand_name: str = DEFAULT_BRAND_NAME,
    year: int | None = None,
) -> str:
    """Render the notification email body. User text is HTML-escaped."""
    template = _template_env().get_template(TEMPLATE_NAME)
    return template.render(
        subject=subject,
        title=title,
        message=message,
        cta_url=cta_url,
        cta_text=cta_text,
        brand_name=brand_name,
        year=year or datetime.now(timezone.utc).year,
    )


class EmailNotificationSender:
    """
    Sends notifications through an email provider.

    Like NotificationSender, an unconfigured sender logs instead of sending.
    """

    def __init__(
        self,
        provider: EmailProvider | None,
        api_key: str | None = None,
        sender: str = DEFAULT_SENDER,
        brand_name: str = DEFAULT_BRAND_NAME,
        mark_sent: Callable[[Any], None] | None = None,
    ):
        self.provider = provider
        self.api_key = api_key
        self.sender = sender
        self.brand_name = brand_name
        self.mark_sent = mark_sent

    @property
    def configured(self) -> bool:
        return bool(self.provider and self.api_key)

    @classmethod
    def from_settings(cls, settings: Any, mark_sent: Callable[[Any], None] | None = None) -> "EmailNotificationSender":
        """Resend sender when an API key is set, logging-only sender otherwise."""
        provider = None
        if settings.email_configured:
            from notifications_whatsapp.providers.resend import ResendEmailProvider
            provider = ResendEmailProvider()

        return cls(
            provider=provider,
            api_key=settings.RESEND_API_KEY,
            sender=settings.EMAIL_FROM,
            brand_name=settings.EMAIL_BRAND_NAME,
            mark_sent=mark_sent,
        )

    async def send(
        self,
        recipient_email: str | None,
        subject: str | None,
        title: str | None,
        message: str | None,
        cta_url: str | None = None,
        cta_text: str | None = None,
        notification_id: Any = None,
    ) -> dict[str, Any]:
        """
        Send one notification email.

        Raises:
            NotificationValidationError: a required field is missing
            ProviderError: the email API rejected the message
        """
        if not recipient_email or not subject or not title or not message:
            raise NotificationValidationError("Missing required fields: recipientEmail, subject, title, message")

        if not self.configured:
            logger.info(
                "Email not configured - logging message instead",
                extra={"to": recipient_email, "subject": subject},
            )
            return {
                "success": True,
                "message": NOT_CONFIGURED_MESSAGE,
                "logged": {"recipientEmail": recipient_email, "subject": subject},
            }

        html = render_notification_email(
            subject=subject,
            title=title,
            message=message,
            cta_url=cta_url,
            cta_text=cta_text,
            brand_name=self.brand_name,
        )

        response = await self.provider.send_email(
            api_key=self.api_key,
            sender=self.sender,
            to=[recipient_email],
            subject=subject,
            html=html,
        )

        if not response.success:
            raise ProviderError(
                message=f"Email API error: {response.error_message}",
                code=response.error_code,
                details=response.raw_response,
            )

        logger.info(
            "Notification email sent",
            extra={"to": recipient_email, "email_id": response.message_id, "notification_id": str(notification_id or "")},
        )

        if notification_id and self.mark_sent:
            self.mark_sent(notification_id)

        return {"success": True, "data": response.raw_response}

    async def close(self) -> None:
        if self.provider:
            await self.provider.close()
