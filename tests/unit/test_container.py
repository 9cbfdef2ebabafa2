"""
Tests for taskbridge/container.py
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from taskbridge.container import ServiceContainer
from taskbridge.models.task import AggregationResult


@pytest.fixture
def container(test_settings):
    return ServiceContainer.create(
        settings=test_settings,
        monday=MagicMock(),
        directory=MagicMock(),
    )


class TestServiceContainer:
    """Tests for the service graph."""

    def test_single_shared_cache(self, container):
        """Test every component shares the one cache instance."""
        assert container.aggregator.cache is container.cache
        assert container.daily_summary.cache is container.cache

    def test_shared_clients(self, container):
        """Test the resolver and summary use the same directory client."""
        assert container.resolver.directory is container.directory
        assert container.daily_summary.directory is container.directory
        assert container.aggregator.client is container.monday
        assert container.scheduler.daily_summary is container.daily_summary

    def test_negative_ttl_from_settings(self, test_settings):
        """Test the resolver picks up the negative cache TTL."""
        test_settings.identity_negative_ttl = 120
        container = ServiceContainer.create(test_settings, monday=MagicMock(), directory=MagicMock())
        assert container.resolver.negative_ttl == 120

    @pytest.mark.asyncio
    async def test_tasks_for_slack_user(self, container):
        """Test the Slack user is resolved before aggregating."""
        container.resolver.resolve_directory_identifier = AsyncMock(return_value="jane@example.com")
        expected = AggregationResult()
        container.aggregator.get_all_user_tasks = AsyncMock(return_value=expected)

        result = await container.get_tasks_for_slack_user("U001")

        assert result is expected
        container.aggregator.get_all_user_tasks.assert_awaited_once_with("jane@example.com")

    @pytest.mark.asyncio
    async def test_unresolvable_slack_user(self, container):
        """Test an unmapped Slack user yields None without aggregating."""
        container.resolver.resolve_directory_identifier = AsyncMock(return_value=None)
        container.aggregator.get_all_user_tasks = AsyncMock()

        assert await container.get_tasks_for_slack_user("U404") is None
        container.aggregator.get_all_user_tasks.assert_not_awaited()
