"""
Notifications WhatsApp - outbound WhatsApp and email notifications.

This package provides:
- Provider interfaces with Meta Cloud API, Resend and stub implementations
- NotificationSender, which formats and sends a WhatsApp notification
- EmailNotificationSender, which renders and sends a notification email
- Both report delivery back to the notifications table
"""
