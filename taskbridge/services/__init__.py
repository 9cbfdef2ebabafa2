"""Core services: aggregation, classification and identity resolution."""

from .aggregator import BoardAggregator, enrich_items
from .classifier import classify_tasks, matches_assignee, group_tasks_by_assignee
from .identity import IdentityResolver

__all__ = [
    "BoardAggregator",
    "enrich_items",
    "classify_tasks",
    "matches_assignee",
    "group_tasks_by_assignee",
    "IdentityResolver",
]
