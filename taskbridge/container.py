"""
Application service container.

Builds exactly one cache, one client per upstream service and one instance
of each core service, and passes them to every component that needs them.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from config.settings import Settings, get_settings
from .cache.app_cache import AppCache
from .integrations.monday import MondayClient
from .integrations.slack import SlackDirectory
from .scheduler.daily_summary import DailySummary
from .scheduler.jobs import SchedulerManager
from .services.aggregator import BoardAggregator
from .services.identity import IdentityResolver

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Process-wide service graph."""
    settings: Settings
    cache: AppCache
    monday: MondayClient
    directory: SlackDirectory
    resolver: IdentityResolver
    aggregator: BoardAggregator
    daily_summary: DailySummary
    scheduler: SchedulerManager

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        monday: Optional[MondayClient] = None,
        directory: Optional[SlackDirectory] = None,
    ) -> "ServiceContainer":
        settings = settings or get_settings()
        cache = AppCache(settings)
        monday = monday or MondayClient(settings=settings)
        directory = directory or SlackDirectory(settings=settings)
        resolver = IdentityResolver(directory, negative_ttl=settings.identity_negative_ttl)
        aggregator = BoardAggregator(monday, cache, settings)
        daily_summary = DailySummary(aggregator, resolver, directory, cache, settings)
        scheduler = SchedulerManager(daily_summary, settings)

        logger.info("Service container initialized")
        return cls(
            settings=settings,
            cache=cache,
            monday=monday,
            directory=directory,
            resolver=resolver,
            aggregator=aggregator,
            daily_summary=daily_summary,
            scheduler=scheduler,
        )

    async def get_tasks_for_slack_user(self, slack_user_id: str):
        """
        Classified tasks for a Slack user ("list my tasks").

        Returns:
            AggregationResult, or None if the user has no monday.com identity
        """
        identifier = await self.resolver.resolve_directory_identifier(slack_user_id)
        if not identifier:
            logger.warning(f"No monday.com identity for Slack user {slack_user_id}")
            return None
        return await self.aggregator.get_all_user_tasks(identifier)
