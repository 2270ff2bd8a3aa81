"""
Notification Providers

Provider implementations for WhatsApp and email.
Supports Meta Cloud API and Resend (production) and Stubs (development).
"""

from notifications_whatsapp.providers.base import (
    EmailProvider,
    ProviderError,
    ProviderResponse,
    WhatsAppProvider,
)

__all__ = [
    "EmailProvider",
    "ProviderError",
    "ProviderResponse",
    "WhatsAppProvider",
]
