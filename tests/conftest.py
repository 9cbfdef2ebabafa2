"""
Pytest configuration and shared fixtures.
"""

import pytest

from config.settings import Settings
from taskbridge.cache.app_cache import AppCache
from taskbridge.integrations.slack import DirectoryUser

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


@pytest.fixture
def test_settings():
    """Settings with no pacing delay and fixed defaults."""
    return Settings(
        monday_api_key="test-key",
        slack_bot_token="xoxb-test",
        board_batch_delay=0,
        timezone="UTC",
    )


@pytest.fixture
def app_cache(test_settings):
    """Fresh application cache."""
    return AppCache(test_settings)


@pytest.fixture
def directory_users():
    """A small Slack directory."""
    return [
        DirectoryUser(id="UBOT", email="bot@example.com", real_name="Build Bot", is_bot=True),
        DirectoryUser(id="UGONE", email="old@example.com", real_name="Jane Doe", deleted=True),
        DirectoryUser(id="U001", email="jane.doe@example.com", real_name="Jane Doe", display_name="jane"),
        DirectoryUser(id="U002", email="john@example.com", real_name="John Smith", display_name="johnny"),
        DirectoryUser(id="U003", email=None, real_name="Jane Doe", display_name="jd"),
    ]
