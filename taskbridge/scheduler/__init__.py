from .daily_summary import DailySummary, SummaryReport, build_summary_blocks
from .jobs import SchedulerManager

__all__ = [
    "DailySummary",
    "SummaryReport",
    "build_summary_blocks",
    "SchedulerManager",
]
