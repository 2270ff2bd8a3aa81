"""
Pytest fixtures for WhatsApp notification tests.
"""

import pytest


@pytest.fixture
def sample_phone():
    """Sample Haitian phone number as users type it."""
    return "+509 3712-3456"


@pytest.fixture
def graph_requests():
    """Requests captured by the mock Graph API transport."""
    return []
