from .board import Board, ColumnDef, ColumnValue, Item, ACTIVE_BOARD_STATES
from .task import Task, ClassifiedTask, ClassificationResult, AggregationResult
from .preferences import UserPreferences

__all__ = [
    "Board",
    "ColumnDef",
    "ColumnValue",
    "Item",
    "ACTIVE_BOARD_STATES",
    "Task",
    "ClassifiedTask",
    "ClassificationResult",
    "AggregationResult",
    "UserPreferences",
]
