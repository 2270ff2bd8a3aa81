"""WhatsApp and email notification endpoints."""

from fastapi import APIRouter, Depends

from marketplace_api.deps import get_email_sender, get_notification_sender
from marketplace_api.schemas import EmailNotificationRequest, WhatsAppNotificationRequest
from notifications_whatsapp.service import EmailNotificationSender, NotificationSender

notifications_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notifications_router.post("/whatsapp")
async def send_whatsapp_notification(
    body: WhatsAppNotificationRequest,
    sender: NotificationSender = Depends(get_notification_sender),
):
    """
    Send a notification over WhatsApp.

    Validation and provider errors are turned into JSON errors by the app's
    exception handlers.
    """
    try:
        return await sender.send(
            phone=body.phone,
            message=body.message,
            template_name=body.template_name,
            template_params=body.template_params,
            notification_id=body.notification_id,
        )
    finally:
        await sender.close()


@notifications_router.post("/email")
async def send_email_notification(
    body: EmailNotificationRequest,
    sender: EmailNotificationSender = Depends(get_email_sender),
):
    """Send a notification email."""
    try:
        return await sender.send(
            recipient_email=body.recipient_email,
            subject=body.subject,
            title=body.title,
            message=body.message,
            cta_url=body.cta_url,
            cta_text=body.cta_text,
            notification_id=body.notification_id,
        )
    finally:
        await sender.close()
