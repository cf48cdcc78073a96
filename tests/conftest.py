"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Config  # noqa: E402
from transport.kommo.security import compute_signature  # noqa: E402

CHANNEL_SECRET = "test_channel_secret"
ACCESS_TOKEN = "test_access_token"
BASE_URL = "https://wamid.kommo.com"


@pytest.fixture
def make_config():
    """Config factory with a fully provisioned default."""

    def _make(**overrides) -> Config:
        values = {
            "base_url": BASE_URL,
            "channel_secret": CHANNEL_SECRET,
            "access_token": ACCESS_TOKEN,
        }
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def sign():
    """Signature helper: sign(body, secret=CHANNEL_SECRET) -> hex digest."""

    def _sign(body: bytes, secret: str = CHANNEL_SECRET) -> str:
        return compute_signature(body, secret)

    return _sign
