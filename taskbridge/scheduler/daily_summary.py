"""
Daily task summary broadcast.

Aggregates every active board once, groups tasks by the owners named in
their person columns, maps owners to Slack users in a single batch and sends
each owner a direct message. One recipient failing never stops the others.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from config.settings import Settings, get_settings
from ..cache.app_cache import AppCache
from ..exceptions import DeliveryError, MondayAPIError
from ..integrations.slack import SlackDirectory
from ..models.task import ClassificationResult, ClassifiedTask, Task
from ..services.aggregator import BoardAggregator
from ..services.classifier import classify_tasks, group_tasks_by_assignee, is_completed_status
from ..services.identity import IdentityResolver
from ..utils.datetime_utils import format_due_date, get_start_of_today

logger = logging.getLogger(__name__)


@dataclass
class SummaryReport:
    """Outcome of one daily summary run."""
    sent: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def build_summary_blocks(classified: ClassificationResult, max_tasks: int = 5) -> List[Dict[str, Any]]:
    """Slack Block Kit layout for one owner's summary."""
    pending = [t for t in classified.my_tasks if not is_completed_status(t.status)]
    completed = [t for t in classified.my_tasks if is_completed_status(t.status)]
    overdue = [t for t in classified.overdue if t.is_my_task]

    blocks: List[Dict[str, Any]] = [
        {
            "type": "header",
            "text": {"type": "plain_text", "text": "📊 Daily Task Summary", "emoji": True},
        },
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": "Good morning! Here's your task overview:"},
        },
        {"type": "divider"},
        {
            "type": "section",
            "fields": [
                {"type": "mrkdwn", "text": f"*📝 Pending Tasks:*\n{len(pending)}"},
                {"type": "mrkdwn", "text": f"*✅ Completed:*\n{len(completed)}"},
                {"type": "mrkdwn", "text": f"*🚨 Overdue:*\n{len(overdue)}"},
            ],
        },
    ]

    if pending:
        blocks.append({
            "type": "section",
            "text": {"type": "mrkdwn", "text": "*Your pending tasks:*"},
        })
        for task in pending[:max_tasks]:
            blocks.append({
                "type": "section",
                "text": {"type": "mrkdwn", "text": _task_line(task)},
            })
        if len(pending) > max_tasks:
            blocks.append({
                "type": "context",
                "elements": [{
                    "type": "mrkdwn",
                    "text": f"_...and {len(pending) - max_tasks} more tasks_",
                }],
            })

    return blocks


def _task_line(task: ClassifiedTask) -> str:
    line = f"• *{task.name}* - _{task.board_name}_ ({task.status})"
    if task.due_date:
        line += f"\n  Due: {format_due_date(task.due_date)}"
    return line


class DailySummary:
    """Composes aggregation, identity resolution and delivery once per tick."""

    def __init__(
        self,
        aggregator: BoardAggregator,
        resolver: IdentityResolver,
        directory: SlackDirectory,
        cache: AppCache,
        settings: Optional[Settings] = None,
    ):
        self.aggregator = aggregator
        self.resolver = resolver
        self.directory = directory
        self.cache = cache
        self.settings = settings or get_settings()

    async def send(self) -> SummaryReport:
        """
        Send every task owner their summary.

        Returns:
            SummaryReport of sent/skipped/failed recipients (owner strings
            for unmapped owners, Slack ids otherwise)
        """
        report = SummaryReport()
        logger.info("Starting daily task summary...")

        try:
            aggregation = await self.aggregator.get_all_user_tasks(None)
        except MondayAPIError as e:
            logger.error(f"Error sending daily summaries: {e}")
            return report

        tasks_by_owner = group_tasks_by_assignee(aggregation.tasks)
        if not tasks_by_owner:
            logger.info("No assigned tasks, nothing to send")
            return report

        user_ids = await self.resolver.resolve_many_messaging_user_ids(tasks_by_owner.keys())

        recipients: Dict[str, List[str]] = {}
        for owner in tasks_by_owner:
            user_id = user_ids.get(owner)
            if not user_id:
                logger.warning(f"Skipping summary for '{owner}' - no Slack user found")
                report.skipped.append(owner)
                continue
            recipients.setdefault(user_id, []).append(owner)

        today = get_start_of_today(self.settings.timezone)

        for user_id, owners in recipients.items():
            prefs = self.cache.get_user_preferences(user_id)
            if not prefs.notifications:
                logger.info(f"Skipping summary for {user_id} - notifications disabled")
                report.skipped.append(user_id)
                continue

            # Several owner strings can name one user; a task listed under
            # more than one of them is summarized once.
            user_tasks: Dict[Tuple[str, str], Task] = {}
            for owner in owners:
                for task in tasks_by_owner[owner]:
                    user_tasks.setdefault((task.board_id, task.id), task)

            try:
                classified = classify_tasks(
                    user_tasks.values(), owners[0], today=today, aliases=owners[1:]
                )
                await self.send_user_summary(user_id, owners[0], classified)
                report.sent.append(user_id)
            except DeliveryError as e:
                logger.error(f"Failed to send summary to {user_id}: {e}")
                report.failed.append(user_id)
            except Exception as e:
                logger.exception(f"Unexpected error sending summary to {user_id}: {e}")
                report.failed.append(user_id)

        logger.info(
            f"Daily task summary completed: {len(report.sent)} sent, "
            f"{len(report.skipped)} skipped, {len(report.failed)} failed"
        )
        return report

    async def send_user_summary(self, user_id: str, owner: str, classified: ClassificationResult) -> None:
        """Deliver one owner's summary by direct message."""
        blocks = build_summary_blocks(classified, self.settings.summary_max_tasks)
        text = f"Daily Task Summary: {len(classified.my_tasks)} tasks assigned to {owner}"
        await self.directory.post_message(user_id, text, blocks)
