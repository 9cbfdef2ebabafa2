"""
Application cache with typed accessors.

One instance per process, shared by every component that needs it:
- Board item lists (5 minutes)
- Single tasks (10 minutes)
- User preferences (24 hours)
"""
import logging
from typing import Any, Dict, List, Optional

from config.settings import Settings, get_settings
from .ttl_cache import TTLCache
from ..models.preferences import UserPreferences
from ..models.task import Task

logger = logging.getLogger(__name__)


class AppCache:
    """Key-scoped accessors over a single TTLCache."""

    def __init__(self, settings: Optional[Settings] = None, store: Optional[TTLCache] = None):
        self.settings = settings or get_settings()
        self.store = store or TTLCache(default_ttl=self.settings.cache_ttl)
        self.stats = self.store.stats

    # Board items

    def get_board_items(self, board_id: str) -> Optional[List[Task]]:
        return self.store.get(f"board:{board_id}:items")

    def set_board_items(self, board_id: str, items: List[Task]) -> None:
        self.store.set(f"board:{board_id}:items", items, self.settings.board_items_ttl)

    def invalidate_board(self, board_id: str) -> None:
        self.store.delete(f"board:{board_id}:items")

    # Tasks

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.store.get(f"task:{task_id}")

    def set_task(self, task_id: str, task: Task) -> None:
        self.store.set(f"task:{task_id}", task, self.settings.task_ttl)

    def invalidate_task(self, task_id: str) -> None:
        self.store.delete(f"task:{task_id}")

    # User preferences

    def get_user_preferences(self, user_id: str) -> UserPreferences:
        """Stored preferences for a Slack user, or the defaults."""
        prefs = self.store.get(f"user:{user_id}:preferences")
        if prefs is None:
            return UserPreferences()
        return prefs

    def set_user_preferences(self, user_id: str, preferences: UserPreferences) -> None:
        self.store.set(
            f"user:{user_id}:preferences",
            preferences,
            self.settings.user_preferences_ttl,
        )
        logger.debug(f"Stored preferences for {user_id}")

    def get_stats(self) -> Dict[str, Any]:
        """Cache size, keys and hit/miss summary."""
        return {
            "size": self.store.size,
            "keys": self.store.keys(),
            **self.stats.get_summary(),
        }
