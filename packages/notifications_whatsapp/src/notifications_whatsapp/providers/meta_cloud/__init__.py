"""Meta Cloud API WhatsApp provider."""

from notifications_whatsapp.providers.meta_cloud.client import (
    GRAPH_API_BASE_URL,
    MetaCloudWhatsAppProvider,
)

__all__ = [
    "GRAPH_API_BASE_URL",
    "MetaCloudWhatsAppProvider",
]
