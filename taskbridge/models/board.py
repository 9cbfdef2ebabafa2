"""Board and column data models for the monday.com work item service."""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Board states that take part in aggregation
ACTIVE_BOARD_STATES = frozenset({"active", "all_users"})


class ColumnDef(BaseModel):
    """Static column schema entry of a board."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    title: str = ""
    type: str = ""


class ColumnValue(BaseModel):
    """
    A column value of an item.

    Raw values from monday.com carry id, type, text and value (a JSON-encoded
    payload). Enrichment against the board's ColumnDefs fills title and
    column_type.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    type: Optional[str] = None
    text: Optional[str] = None
    value: Optional[str] = None

    # Enrichment
    title: Optional[str] = None
    column_type: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _encode_value(cls, data: Any) -> Any:
        # value is opaque JSON on the wire; accept decoded payloads too
        if isinstance(data, dict) and isinstance(data.get("value"), (dict, list)):
            data = {**data, "value": json.dumps(data["value"])}
        return data

    def parsed_value(self) -> Optional[Any]:
        """Decode the JSON payload, or None when absent or malformed."""
        if not self.value:
            return None
        try:
            return json.loads(self.value)
        except (TypeError, ValueError):
            return None

    def enrich(self, column: Optional[ColumnDef]) -> "ColumnValue":
        """Copy with title and column_type resolved from a ColumnDef."""
        if column is None:
            return self.model_copy(update={"title": self.id, "column_type": "unknown"})
        return self.model_copy(update={
            "title": column.title or self.id,
            "column_type": column.type or "unknown",
        })


class Item(BaseModel):
    """A raw board item as returned by monday.com."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str = ""
    state: Optional[str] = None
    column_values: List[ColumnValue] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Board(BaseModel):
    """A monday.com board with its column schema and (optionally) items."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str = ""
    state: Optional[str] = None
    board_kind: Optional[str] = None
    columns: List[ColumnDef] = Field(default_factory=list)
    items: List[Item] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten_items_page(cls, data: Any) -> Any:
        if isinstance(data, dict) and "items_page" in data and "items" not in data:
            page = data.get("items_page") or {}
            data = {**data, "items": page.get("items") or []}
        return data

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_BOARD_STATES

    def column_index(self) -> Dict[str, ColumnDef]:
        """Map of column id to ColumnDef."""
        return {column.id: column for column in self.columns}
