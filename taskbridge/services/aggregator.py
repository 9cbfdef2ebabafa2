"""
Multi-board task aggregation.

Discovers active boards, fetches their items in paced batches, joins each
item's column values against its board's column schema and hands the
flattened task list to the classifier.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from config.settings import Settings, get_settings
from ..cache.app_cache import AppCache
from ..integrations.monday import MondayClient
from ..models.board import Board, Item
from ..models.task import AggregationResult, ClassificationResult, Task
from ..utils.datetime_utils import get_start_of_today
from .classifier import classify_tasks, find_people_column, matches_assignee

logger = logging.getLogger(__name__)


def enrich_items(board: Board, items: List[Item]) -> List[Task]:
    """
    Attach board attribution and column metadata to raw items.

    Every column value is enriched exactly once; a value whose id has no
    ColumnDef keeps its id as title and gets column_type "unknown".
    """
    columns = board.column_index()
    return [
        Task(
            id=item.id,
            name=item.name,
            state=item.state,
            board_id=board.id,
            board_name=board.name,
            column_values=[cv.enrich(columns.get(cv.id)) for cv in item.column_values],
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
        for item in items
    ]


class BoardAggregator:
    """
    Aggregates tasks across every active monday.com board.

    Batches are fetched sequentially with a fixed delay between them to keep
    the request rate under monday.com's quota.
    """

    def __init__(
        self,
        client: MondayClient,
        cache: AppCache,
        settings: Optional[Settings] = None,
    ):
        self.client = client
        self.cache = cache
        self.settings = settings or get_settings()
        self.batch_size = self.settings.board_batch_size
        self.batch_delay = self.settings.board_batch_delay
        self.item_limit = self.settings.board_item_limit

    def today(self):
        """Start of today in the configured timezone."""
        return get_start_of_today(self.settings.timezone)

    async def list_active_boards(self) -> List[Board]:
        """All boards whose state is active or all_users."""
        boards = await self.client.get_all_boards()
        active = [board for board in boards if board.is_active]
        logger.info(f"Found {len(boards)} boards, {len(active)} active")
        return active

    async def fetch_tasks_for_boards(
        self,
        board_ids: List[str],
        item_limit: Optional[int] = None,
    ) -> List[Board]:
        """
        Fetch items and column schema for one batch of boards.

        Args:
            board_ids: At most batch_size (25) board ids
            item_limit: Maximum items per board

        Returns:
            Boards with columns and items

        Raises:
            ValueError: If the batch is larger than batch_size
            MondayAPIError: On upstream failure
        """
        if len(board_ids) > self.batch_size:
            raise ValueError(f"At most {self.batch_size} boards per request, got {len(board_ids)}")
        if not board_ids:
            return []
        return await self.client.get_boards_with_items(board_ids, item_limit or self.item_limit)

    async def get_all_user_tasks(self, identifier: Optional[str]) -> AggregationResult:
        """
        Fetch, enrich and classify tasks from all active boards.

        Args:
            identifier: Email or name of the requesting user in monday.com

        Returns:
            AggregationResult with the flat task list, the active boards and
            the classification against identifier

        Raises:
            MondayAPIError: If listing boards or any batch fails; no partial
                result is returned
        """
        logger.info(f"Fetching all boards for user: {identifier}")
        boards = await self.list_active_boards()

        if not boards:
            return AggregationResult(classified=ClassificationResult.empty())

        board_ids = [board.id for board in boards]
        all_tasks: List[Task] = []

        for start in range(0, len(board_ids), self.batch_size):
            batch_ids = board_ids[start:start + self.batch_size]
            logger.info(
                f"Fetching tasks from boards {start + 1}-{start + len(batch_ids)} of {len(board_ids)}"
            )

            for board in await self.fetch_tasks_for_boards(batch_ids):
                all_tasks.extend(enrich_items(board, board.items))

            if start + self.batch_size < len(board_ids):
                await asyncio.sleep(self.batch_delay)

        logger.info(f"Total tasks found: {len(all_tasks)}")

        return AggregationResult(
            tasks=all_tasks,
            boards=boards,
            classified=classify_tasks(all_tasks, identifier, today=self.today()),
        )

    # ==================== Single-board paths ====================

    async def get_board_tasks(
        self,
        board_id: str,
        item_limit: Optional[int] = None,
        use_cache: bool = True,
    ) -> List[Task]:
        """
        Enriched tasks of one board, read through the board item cache.
        """
        if use_cache:
            cached = self.cache.get_board_items(board_id)
            if cached is not None:
                return cached

        boards = await self.fetch_tasks_for_boards([board_id], item_limit)
        tasks = enrich_items(boards[0], boards[0].items) if boards else []
        self.cache.set_board_items(board_id, tasks)
        return tasks

    async def get_user_tasks(self, board_id: Optional[str], identifier: Optional[str]) -> List[Task]:
        """
        Tasks assigned to identifier on one board, or on every board when
        board_id is None.
        """
        if not board_id:
            result = await self.get_all_user_tasks(identifier)
            return list(result.classified.my_tasks)

        my_tasks = []
        for task in await self.get_board_tasks(board_id):
            people_column = find_people_column(task)
            if people_column and matches_assignee(people_column.text, identifier):
                my_tasks.append(task)
        return my_tasks

    async def get_task(self, item_id: str) -> Optional[Task]:
        """A single enriched task, cached for a few minutes."""
        cached = self.cache.get_task(item_id)
        if cached is not None:
            return cached

        raw = await self.client.get_item(item_id)
        if not raw or not raw.get("board"):
            return None

        board = Board.model_validate(raw["board"])
        item = Item.model_validate(raw)
        task = enrich_items(board, [item])[0]
        self.cache.set_task(item_id, task)
        return task

    async def create_task(
        self,
        board_id: str,
        name: str,
        column_values: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        created = await self.client.create_item(board_id, name, column_values)
        self.cache.invalidate_board(board_id)
        return created

    async def update_task(self, board_id: str, item_id: str, column_values: Dict[str, Any]) -> Dict[str, Any]:
        updated = await self.client.change_column_values(board_id, item_id, column_values)
        self.cache.invalidate_task(item_id)
        self.cache.invalidate_board(board_id)
        return updated

    async def delete_task(self, item_id: str, board_id: Optional[str] = None) -> Dict[str, Any]:
        deleted = await self.client.delete_item(item_id)
        self.cache.invalidate_task(item_id)
        if board_id:
            self.cache.invalidate_board(board_id)
        return deleted

    async def add_comment(self, item_id: str, body: str) -> Dict[str, Any]:
        return await self.client.create_update(item_id, body)
