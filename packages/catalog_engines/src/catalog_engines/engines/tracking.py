"""
Catalog click tracking helpers.

Sellers share catalogs (PDF, WhatsApp status, links) carrying a tracking
pixel or link. Clicks are stored with a truncated user agent and a salted
IP hash, never the raw IP.
"""

import hashlib
import re

MAX_USER_AGENT_LENGTH = 500
IP_HASH_LENGTH = 16

_MOBILE_UA = re.compile(r"mobile|android|iphone|ipad", re.IGNORECASE)

# 1x1 transparent GIF served for pixel tracking
TRANSPARENT_GIF = bytes([
    0x47, 0x49, 0x46, 0x38, 0x39, 0x61, 0x01, 0x00,
    0x01, 0x00, 0x80, 0x00, 0x00, 0xFF, 0xFF, 0xFF,
    0x00, 0x00, 0x00, 0x21, 0xF9, 0x04, 0x01, 0x00,
    0x00, 0x00, 0x00, 0x2C, 0x00, 0x00, 0x00, 0x00,
    0x01, 0x00, 0x01, 0x00, 0x00, 0x02, 0x02, 0x44,
    0x01, 0x00, 0x3B,
])


def detect_device_type(user_agent: str | None) -> str:
    return "mobile" if _MOBILE_UA.search(user_agent or "") else "desktop"


def client_ip(forwarded_for: str | None, real_ip: str | None) -> str:
    """Prefer X-Real-IP, else the first hop of X-Forwarded-For."""
    if real_ip:
        return real_ip
    return (forwarded_for or "").split(",")[0].strip()


def hash_ip(ip: str, salt: str) -> str:
    digest = hashlib.sha256(f"{ip}{salt}".encode("utf-8")).hexdigest()
    return digest[:IP_HASH_LENGTH]


def truncate_user_agent(user_agent: str | None) -> str:
    return (user_agent or "")[:MAX_USER_AGENT_LENGTH]
