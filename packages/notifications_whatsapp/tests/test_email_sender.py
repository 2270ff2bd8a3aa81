"""
Tests for the Resend provider and the email notification sender.
"""

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from notifications_whatsapp.providers.base import ProviderError
from notifications_whatsapp.providers.resend import ResendEmailProvider
from notifications_whatsapp.providers.stub import StubEmailProvider
from notifications_whatsapp.service import NotificationValidationError
from notifications_whatsapp.service.email_sender import (
    EmailNotificationSender,
    render_notification_email,
)


def make_provider(resend_requests, status_code=200, body=None):
    """Provider whose HTTP calls are answered by a mock transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        resend_requests.append(request)
        return httpx.Response(status_code, json=body if body is not None else {"id": "email-1"})

    return ResendEmailProvider(transport=httpx.MockTransport(handler))


@pytest.fixture
def resend_requests():
    return []


@pytest.fixture
def sample_email():
    return {
        "recipient_email": "cliente@example.com",
        "subject": "Pedido enviado",
        "title": "Tu pedido va en camino",
        "message": "Llegará en 5 días",
    }


class TestResendProvider:
    def test_send_email(self, resend_requests):
        """Test payload, endpoint and auth header."""
        provider = make_provider(resend_requests)

        response = asyncio.run(
            provider.send_email("re_key", "Shop <n@example.com>", ["a@example.com"], "Hola", "<p>Hola</p>")
        )

        assert response.success is True
        assert response.message_id == "email-1"

        request = resend_requests[0]
        assert str(request.url) == "https://api.resend.com/emails"
        assert request.headers["Authorization"] == "Bearer re_key"
        assert json.loads(request.content) == {
            "from": "Shop <n@example.com>",
            "to": ["a@example.com"],
            "subject": "Hola",
            "html": "<p>Hola</p>",
        }

    def test_api_error_returned_not_raised(self, resend_requests):
        body = {"statusCode": 422, "name": "validation_error", "message": "Invalid `to` field"}
        provider = make_provider(resend_requests, status_code=422, body=body)

        response = asyncio.run(provider.send_email("re_key", "s", ["bad"], "Hola", "<p></p>"))

        assert response.success is False
        assert response.error_code == "validation_error"
        assert response.error_message == "Invalid `to` field"
        assert response.raw_response == body

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        provider = ResendEmailProvider(transport=httpx.MockTransport(handler))

        response = asyncio.run(provider.send_email("re_key", "s", ["a@example.com"], "Hola", "<p></p>"))

        assert response.success is False
        assert response.error_code == "HTTP_ERROR"


class TestRenderNotificationEmail:
    def test_renders_content_and_footer(self):
        html = render_notification_email("Asunto", "Título", "Mensaje", brand_name="Tienda", year=2025)

        assert "<title>Asunto</title>" in html
        assert '<p class="title">Título</p>' in html
        assert '<p class="message">Mensaje</p>' in html
        assert "Este es un mensaje automático de Tienda." in html
        assert "2025 Tienda" in html
        assert 'class="cta"' not in html

    def test_cta_defaults_text(self):
        html = render_notification_email("A", "T", "M", cta_url="https://shop.example/o/1")

        assert '<a href="https://shop.example/o/1" class="cta">Ver más</a>' in html

    def test_user_text_is_escaped(self):
        html = render_notification_email("A", "<b>T</b>", "M & N")

        assert "&lt;b&gt;T&lt;/b&gt;" in html
        assert "M &amp; N" in html


class TestEmailNotificationSender:
    @pytest.fixture
    def provider(self):
        return StubEmailProvider()

    @pytest.fixture
    def marked(self):
        return []

    @pytest.fixture
    def sender(self, provider, marked):
        return EmailNotificationSender(
            provider=provider,
            api_key="re_key",
            sender="Shop <n@example.com>",
            mark_sent=marked.append,
        )

    def test_send(self, sender, provider, sample_email, marked):
        result = asyncio.run(sender.send(**sample_email, cta_url="https://shop.example", notification_id="n-1"))

        assert result["success"] is True
        sent = provider.sent_emails[0]
        assert sent["to"] == ["cliente@example.com"]
        assert sent["from"] == "Shop <n@example.com>"
        assert sent["subject"] == "Pedido enviado"
        assert "Tu pedido va en camino" in sent["html"]
        assert marked == ["n-1"]

    @pytest.mark.parametrize("missing", ["recipient_email", "subject", "title", "message"])
    def test_missing_fields(self, sender, provider, sample_email, missing):
        sample_email[missing] = None

        with pytest.raises(NotificationValidationError, match="recipientEmail, subject, title, message"):
            asyncio.run(sender.send(**sample_email))
        assert provider.sent_emails == []

    def test_not_configured_logs_message(self, sample_email, marked):
        sender = EmailNotificationSender(provider=None, mark_sent=marked.append)

        result = asyncio.run(sender.send(**sample_email, notification_id="n-1"))

        assert result["message"] == "Email not configured - message logged"
        assert marked == []

    def test_provider_failure_raises(self, sample_email, marked):
        sender = EmailNotificationSender(provider=StubEmailProvider(fail=True), api_key="re_key", mark_sent=marked.append)

        with pytest.raises(ProviderError, match="Email API error: Simulated failure for testing"):
            asyncio.run(sender.send(**sample_email, notification_id="n-1"))
        assert marked == []

    def test_from_settings(self):
        settings = SimpleNamespace(
            RESEND_API_KEY="re_key",
            EMAIL_FROM="Shop <n@example.com>",
            EMAIL_BRAND_NAME="Shop",
            email_configured=True,
        )

        sender = EmailNotificationSender.from_settings(settings)

        assert isinstance(sender.provider, ResendEmailProvider)
        assert sender.configured is True
        assert sender.brand_name == "Shop"

    def test_from_settings_without_key(self):
        settings = SimpleNamespace(
            RESEND_API_KEY=None,
            EMAIL_FROM="Shop <n@example.com>",
            EMAIL_BRAND_NAME="Shop",
            email_configured=False,
        )

        assert EmailNotificationSender.from_settings(settings).configured is False
