"""Shared FastAPI dependencies."""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from basecore.db import get_db
from basecore.settings import Settings, get_settings
from catalog_engines.persistence.repo import OrdersRepository
from notifications_whatsapp.service import EmailNotificationSender, NotificationSender

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    return get_settings()


def get_notification_sender(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> NotificationSender:
    """Sender that marks the notification row once WhatsApp accepts the message."""

    def mark_sent(notification_id):
        if not OrdersRepository(db).mark_whatsapp_sent(notification_id):
            logger.warning("Sent WhatsApp for unknown notification", extra={"notification_id": str(notification_id)})
        db.commit()

    return NotificationSender.from_settings(settings, mark_sent=mark_sent)


def get_email_sender(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> EmailNotificationSender:
    """Sender that marks the notification row once the email is accepted."""

    def mark_sent(notification_id):
        if not OrdersRepository(db).mark_email_sent(notification_id):
            logger.warning("Sent email for unknown notification", extra={"notification_id": str(notification_id)})
        db.commit()

    return EmailNotificationSender.from_settings(settings, mark_sent=mark_sent)
