"""
Scheduler manager for automated jobs.

Handles scheduled tasks:
- Daily task summary (configurable hour, default 9 AM)
"""

import logging
from typing import Any, Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
import pytz

from config.settings import Settings, get_settings
from .daily_summary import DailySummary

logger = logging.getLogger(__name__)


class SchedulerManager:
    """
    Manages all scheduled jobs.
    """

    def __init__(self, daily_summary: DailySummary, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.daily_summary = daily_summary
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.timezone = pytz.timezone(self.settings.timezone)

    def start(self) -> None:
        """Start the scheduler with all jobs."""
        self.scheduler = AsyncIOScheduler(timezone=self.timezone)

        if self.settings.daily_summary_enabled:
            self.scheduler.add_job(
                self._daily_summary_job,
                CronTrigger(
                    hour=self.settings.daily_summary_hour,
                    minute=self.settings.daily_summary_minute,
                    timezone=self.timezone
                ),
                id="daily_summary",
                name="Daily Task Summary",
                replace_existing=True
            )
            logger.info(
                f"Daily summary scheduled at "
                f"{self.settings.daily_summary_hour:02d}:{self.settings.daily_summary_minute:02d} "
                f"({self.settings.timezone})"
            )

        self.scheduler.start()
        logger.info("Scheduler started with all jobs")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self.scheduler:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")

    def get_jobs(self) -> List[Dict[str, Any]]:
        """Describe scheduled jobs."""
        if not self.scheduler:
            return []
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            }
            for job in self.scheduler.get_jobs()
        ]

    async def _daily_summary_job(self) -> None:
        """Send the daily task summary to every owner."""
        logger.info("Running daily summary job")
        try:
            report = await self.daily_summary.send()
            logger.info(f"Daily summary job finished: {len(report.sent)} delivered")
        except Exception as e:
            logger.exception(f"Daily summary job failed: {e}")
