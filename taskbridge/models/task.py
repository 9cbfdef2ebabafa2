"""Task data models for board aggregation and classification."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .board import Board, ColumnValue


class Task(BaseModel):
    """A board item with enriched column values and its board attribution."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str = ""
    state: Optional[str] = None
    board_id: str
    board_name: str = ""
    column_values: List[ColumnValue] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClassifiedTask(Task):
    """Task decorated by the classifier."""
    status: str = "unknown"
    is_my_task: bool = False
    due_date: Optional[datetime] = None


class ClassificationResult(BaseModel):
    """
    Classification buckets over one set of tasks.

    Buckets may overlap (a task can be in my_tasks and overdue); every list
    references the same ClassifiedTask objects.
    """
    my_tasks: List[ClassifiedTask] = Field(default_factory=list)
    overdue: List[ClassifiedTask] = Field(default_factory=list)
    due_today: List[ClassifiedTask] = Field(default_factory=list)
    due_this_week: List[ClassifiedTask] = Field(default_factory=list)
    completed: List[ClassifiedTask] = Field(default_factory=list)
    unassigned: List[ClassifiedTask] = Field(default_factory=list)
    all_tasks: List[ClassifiedTask] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "ClassificationResult":
        return cls()


class AggregationResult(BaseModel):
    """Output of a multi-board aggregation pass."""
    tasks: List[Task] = Field(default_factory=list)
    boards: List[Board] = Field(default_factory=list)
    classified: ClassificationResult = Field(default_factory=ClassificationResult)
