"""Notification delivery service."""

from notifications_whatsapp.service.email_sender import (
    EmailNotificationSender,
    render_notification_email,
)
from notifications_whatsapp.service.sender import (
    NotificationSender,
    NotificationValidationError,
    format_phone,
)

__all__ = [
    "EmailNotificationSender",
    "NotificationSender",
    "NotificationValidationError",
    "format_phone",
    "render_notification_email",
]
