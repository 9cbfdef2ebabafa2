"""
Task classification: ownership matching and due-date bucketing.

Pure functions, no I/O. Ownership is free-text matching against monday.com's
person column, which is not a structured reference, so the rules are
heuristic and can over-match (a name that is a substring of another name).
The rule order below is relied on by callers and tests.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from ..models.board import ColumnValue
from ..models.task import ClassificationResult, ClassifiedTask, Task
from ..utils.datetime_utils import get_start_of_today, parse_due_date, start_of_day

logger = logging.getLogger(__name__)

STATUS_COLUMN_TYPES = frozenset({"color", "status"})
PEOPLE_COLUMN_TYPES = frozenset({"person", "multiple-person", "people"})
DATE_COLUMN_TYPES = frozenset({"date"})

COMPLETED_STATUSES = frozenset({"done", "complete", "completed", "finished"})

UNKNOWN_STATUS = "unknown"


def normalize_identifier(identifier: Optional[str]) -> str:
    """Lowercase and trim an email or name for comparison."""
    return (identifier or "").strip().lower()


def _types(column: ColumnValue) -> set:
    return {t for t in (column.type, column.column_type) if t}


def _title(column: ColumnValue) -> str:
    return (column.title or "").lower()


def find_status_column(task: Task) -> Optional[ColumnValue]:
    for column in task.column_values:
        if (
            _types(column) & STATUS_COLUMN_TYPES
            or "status" in column.id.lower()
            or "status" in _title(column)
        ):
            return column
    return None


def find_people_column(task: Task) -> Optional[ColumnValue]:
    for column in task.column_values:
        title = _title(column)
        if _types(column) & PEOPLE_COLUMN_TYPES or "person" in title or "assignee" in title:
            return column
    return None


def find_date_column(task: Task) -> Optional[ColumnValue]:
    for column in task.column_values:
        if _types(column) & DATE_COLUMN_TYPES or "due" in _title(column):
            return column
    return None


def matches_assignee(assignee_text: Optional[str], identifier: Optional[str]) -> bool:
    """
    Check whether a person column's text refers to identifier.

    Rules, first success wins:
    1. The whole identifier is a substring of the assignee text.
    2. If the identifier contains "@", its local part is a substring.
    3. If the identifier contains a space, every token is a substring.

    Args:
        assignee_text: Free text of the person column ("Jane Doe, John Smith")
        identifier: Email or display name

    Returns:
        True if the task is considered assigned to identifier
    """
    normalized = normalize_identifier(identifier)
    text = normalize_identifier(assignee_text)
    if not normalized or not text:
        return False

    if normalized in text:
        return True

    if "@" in normalized:
        local_part = normalized.split("@")[0]
        if local_part and local_part in text:
            return True

    if " " in normalized:
        return all(part in text for part in normalized.split())

    return False


def is_completed_status(status: Optional[str]) -> bool:
    return normalize_identifier(status) in COMPLETED_STATUSES


def due_date_sort_key(task: ClassifiedTask):
    """Ascending by due date, tasks without one last."""
    return (task.due_date is None, task.due_date or datetime.min)


def classify_task(task: Task, identifier: Optional[str], aliases: Iterable[str] = ()) -> ClassifiedTask:
    """
    Decorate one task with status, ownership and due date.

    The task is the user's when its person column matches identifier or any
    of aliases. Returns a new ClassifiedTask; the input task is not modified.
    """
    status_column = find_status_column(task)
    people_column = find_people_column(task)
    date_column = find_date_column(task)

    status = UNKNOWN_STATUS
    if status_column and status_column.text:
        status = status_column.text.lower()

    is_my_task = False
    if people_column and people_column.text:
        is_my_task = any(
            matches_assignee(people_column.text, candidate) for candidate in (identifier, *aliases)
        )
        logger.debug(f"Task '{task.name}': assignee='{people_column.text}', match={is_my_task}")

    due_date = parse_due_date(date_column.parsed_value()) if date_column else None

    return ClassifiedTask(
        **task.model_dump(exclude={"column_values", "status", "is_my_task", "due_date"}),
        column_values=task.column_values,
        status=status,
        is_my_task=is_my_task,
        due_date=due_date,
    )


def classify_tasks(
    tasks: Iterable[Task],
    identifier: Optional[str],
    today: Optional[datetime] = None,
    aliases: Iterable[str] = (),
) -> ClassificationResult:
    """
    Classify tasks for one identity.

    Buckets are computed independently and may overlap. Due-date buckets only
    consider tasks that are not completed, regardless of ownership.

    Args:
        tasks: Enriched tasks in discovery order
        identifier: Email or name of the requesting user (None matches nothing)
        today: Reference day; defaults to today in the configured timezone
        aliases: Other owner strings that refer to the same user

    Returns:
        ClassificationResult with my_tasks/overdue/due_today/due_this_week
        sorted ascending by due date (stable, undated last)
    """
    start_of_today = start_of_day(today) if today else get_start_of_today()
    start_of_tomorrow = start_of_today + timedelta(days=1)
    week_from_today = start_of_today + timedelta(days=7)
    aliases = tuple(aliases)

    result = ClassificationResult()

    for task in tasks:
        classified = classify_task(task, identifier, aliases)
        result.all_tasks.append(classified)

        if classified.is_my_task:
            result.my_tasks.append(classified)

        completed = is_completed_status(classified.status)
        if completed:
            result.completed.append(classified)

        people_column = find_people_column(task)
        if not people_column or not people_column.text:
            result.unassigned.append(classified)

        due = classified.due_date
        if due is None or completed:
            continue

        if due < start_of_today:
            result.overdue.append(classified)
        elif due < start_of_tomorrow:
            result.due_today.append(classified)
        elif due <= week_from_today:
            result.due_this_week.append(classified)

    # list.sort is stable, so equal or missing dates keep discovery order
    for bucket in (result.my_tasks, result.overdue, result.due_today, result.due_this_week):
        bucket.sort(key=due_date_sort_key)

    logger.info(
        f"Classified {len(result.all_tasks)} tasks for '{identifier}': "
        f"{len(result.my_tasks)} assigned, {len(result.overdue)} overdue"
    )
    return result


def split_assignees(assignee_text: Optional[str]) -> List[str]:
    """Split a person column's text into individual owner names."""
    return [name.strip() for name in (assignee_text or "").split(",") if name.strip()]


def group_tasks_by_assignee(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    """
    Group tasks under each owner named in their person column.

    A task with several assignees appears under each of them. Owners keep
    first-seen order; names are grouped case-insensitively under the first
    spelling seen.
    """
    groups: Dict[str, List[Task]] = {}
    spellings: Dict[str, str] = {}

    for task in tasks:
        people_column = find_people_column(task)
        if not people_column:
            continue
        for name in split_assignees(people_column.text):
            key = spellings.setdefault(normalize_identifier(name), name)
            groups.setdefault(key, []).append(task)

    return groups
