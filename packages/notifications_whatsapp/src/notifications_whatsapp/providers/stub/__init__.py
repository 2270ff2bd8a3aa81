"""Stub providers for development."""

from notifications_whatsapp.providers.stub.client import StubEmailProvider, StubWhatsAppProvider

__all__ = ["StubEmailProvider", "StubWhatsAppProvider"]
