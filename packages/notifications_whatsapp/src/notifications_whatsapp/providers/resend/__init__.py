"""Resend email provider."""

from notifications_whatsapp.providers.resend.client import (
    RESEND_API_BASE_URL,
    ResendEmailProvider,
)

__all__ = [
    "RESEND_API_BASE_URL",
    "ResendEmailProvider",
]
