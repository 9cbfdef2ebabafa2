"""
Builders for monday.com payloads and enriched tasks used across tests.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from taskbridge.models.board import Board, ColumnValue
from taskbridge.models.task import Task

TODAY = datetime(2026, 3, 10)


def make_task(
    task_id: str = "1",
    name: str = "Test Task",
    status: Optional[str] = "Working on it",
    assignee: Optional[str] = None,
    due: Optional[str] = None,
    board_id: str = "100",
    board_name: str = "Engineering",
    extra_columns: Optional[List[Dict[str, Any]]] = None,
) -> Task:
    """Build an enriched task with the usual status/person/date columns."""
    columns = []
    if status is not None:
        columns.append({
            "id": "status", "type": "status", "text": status,
            "value": None, "title": "Status", "column_type": "status",
        })
    if assignee is not None:
        columns.append({
            "id": "person", "type": "people", "text": assignee,
            "value": None, "title": "Owner", "column_type": "people",
        })
    if due is not None:
        columns.append({
            "id": "date4", "type": "date", "text": due,
            "value": json.dumps({"date": due}), "title": "Due Date", "column_type": "date",
        })
    columns.extend(extra_columns or [])
    return Task(
        id=task_id,
        name=name,
        board_id=board_id,
        board_name=board_name,
        column_values=[ColumnValue(**c) for c in columns],
    )


def raw_board(
    board_id: str,
    name: str,
    state: str = "active",
    items: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """A board payload as monday.com returns it from the items query."""
    return {
        "id": board_id,
        "name": name,
        "state": state,
        "columns": [
            {"id": "status", "title": "Status", "type": "status"},
            {"id": "person", "title": "Owner", "type": "people"},
            {"id": "date4", "title": "Due Date", "type": "date"},
        ],
        "items_page": {"items": items or []},
    }


def raw_item(
    item_id: str,
    name: str,
    status: str = "Working on it",
    assignee: str = "",
    due: Optional[str] = None,
) -> Dict[str, Any]:
    """An item payload as monday.com returns it (no column titles)."""
    return {
        "id": item_id,
        "name": name,
        "state": "active",
        "column_values": [
            {"id": "status", "type": "status", "text": status, "value": None},
            {"id": "person", "type": "people", "text": assignee, "value": None},
            {
                "id": "date4", "type": "date", "text": due or "",
                "value": json.dumps({"date": due}) if due else None,
            },
        ],
        "created_at": "2026-03-01T10:00:00Z",
        "updated_at": "2026-03-02T10:00:00Z",
    }


class FakeMondayClient:
    """In-memory stand-in for MondayClient that records requests."""

    def __init__(self, boards: List[Dict[str, Any]]):
        self.boards = {b["id"]: b for b in boards}
        self.catalog_calls = 0
        self.batches: List[List[str]] = []

    async def get_all_boards(self, page_size=None) -> List[Board]:
        self.catalog_calls += 1
        return [
            Board(id=b["id"], name=b["name"], state=b["state"])
            for b in self.boards.values()
        ]

    async def get_boards_with_items(self, board_ids, limit=50) -> List[Board]:
        self.batches.append(list(board_ids))
        return [Board.model_validate(self.boards[i]) for i in board_ids if i in self.boards]
