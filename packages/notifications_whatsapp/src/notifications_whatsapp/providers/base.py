"""
Notification Provider Base

Abstract interfaces for notification providers.
WhatsApp: Meta Cloud API. Email: Resend. Stubs for development.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class ProviderError(Exception):
    """Error from WhatsApp provider."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.retryable = retryable


@dataclass
class ProviderResponse:
    """
    Response from provider after sending a message.
    """

    success: bool
    message_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


class WhatsAppProvider(ABC):
    """
    Abstract interface for WhatsApp API providers.

    Implementations send text and template messages. Failures are returned
    as unsuccessful ProviderResponse objects, not raised.
    """

    @abstractmethod
    async def send_text(
        self,
        phone_number_id: str,
        access_token: str,
        to: str,
        text: str,
    ) -> ProviderResponse:
        """
        Send a text message.

        Args:
            phone_number_id: Business phone number ID
            access_token: Access token for this number
            to: Recipient phone number, digits only
            text: Message text

        Returns:
            ProviderResponse with message ID if successful
        """
        ...

    @abstractmethod
    async def send_template(
        self,
        phone_number_id: str,
        access_token: str,
        to: str,
        template_name: str,
        language_code: str,
        components: list[dict[str, Any]] | None = None,
    ) -> ProviderResponse:
        """
        Send a template message.

        Args:
            phone_number_id: Business phone number ID
            access_token: Access token for this number
            to: Recipient phone number, digits only
            template_name: Approved template name
            language_code: Template language code (e.g., "es")
            components: Template components (header, body, buttons variables)

        Returns:
            ProviderResponse with message ID if successful
        """
        ...

    async def close(self) -> None:
        """Release provider resources."""


class EmailProvider(ABC):
    """
    Abstract interface for transactional email providers.

    Same contract as WhatsAppProvider: failures come back as unsuccessful
    ProviderResponse objects.
    """

    @abstractmethod
    async def send_email(
        self,
        api_key: str,
        sender: str,
        to: list[str],
        subject: str,
        html: str,
    ) -> ProviderResponse:
        """
        Send an HTML email.

        Args:
            api_key: Provider API key
            sender: From header, e.g. "Shop <notifications@example.com>"
            to: Recipient addresses
            subject: Subject line
            html: Rendered HTML body

        Returns:
            ProviderResponse with the provider's email ID if successful
        """
        ...

    async def close(self) -> None:
        """Release provider resources."""
