"""
Tests for taskbridge/models
"""

from taskbridge.models.board import Board, ColumnDef, ColumnValue
from taskbridge.models.task import ClassificationResult


class TestColumnValue:
    """Tests for ColumnValue."""

    def test_decoded_value_is_encoded(self):
        """Test a dict value is stored as JSON text."""
        column = ColumnValue(id="date4", value={"date": "2026-03-10"})
        assert column.value == '{"date": "2026-03-10"}'
        assert column.parsed_value() == {"date": "2026-03-10"}

    def test_parsed_value_malformed(self):
        """Test malformed or empty payloads parse to None."""
        assert ColumnValue(id="x", value="{oops").parsed_value() is None
        assert ColumnValue(id="x").parsed_value() is None

    def test_enrich_with_definition(self):
        """Test enrichment copies title and type."""
        column = ColumnValue(id="status", type="status", text="Done")
        enriched = column.enrich(ColumnDef(id="status", title="Stage", type="status"))

        assert enriched.title == "Stage"
        assert enriched.column_type == "status"
        assert column.title is None

    def test_enrich_without_definition(self):
        """Test a missing definition falls back to the id and unknown type."""
        enriched = ColumnValue(id="text9").enrich(None)
        assert enriched.title == "text9"
        assert enriched.column_type == "unknown"

    def test_enrich_blank_definition_fields(self):
        """Test blank title or type fall back like a missing definition."""
        enriched = ColumnValue(id="text9").enrich(ColumnDef(id="text9"))
        assert enriched.title == "text9"
        assert enriched.column_type == "unknown"


class TestBoard:
    """Tests for Board."""

    def test_items_page_flattened(self):
        """Test items are read from items_page."""
        board = Board.model_validate({
            "id": 1,
            "name": "Eng",
            "items_page": {"items": [{"id": 10, "name": "A"}]},
        })
        assert board.id == "1"
        assert [i.id for i in board.items] == ["10"]

    def test_null_items_page(self):
        """Test a null items_page yields no items."""
        assert Board.model_validate({"id": "1", "items_page": None}).items == []

    def test_active_states(self):
        """Test only active and all_users boards are active."""
        assert Board(id="1", state="active").is_active is True
        assert Board(id="1", state="all_users").is_active is True
        assert Board(id="1", state="archived").is_active is False
        assert Board(id="1", state="deleted").is_active is False
        assert Board(id="1").is_active is False

    def test_column_index(self):
        """Test columns are indexed by id."""
        board = Board(id="1", columns=[ColumnDef(id="a", title="A"), ColumnDef(id="b", title="B")])
        assert board.column_index()["b"].title == "B"


class TestClassificationResult:
    """Tests for ClassificationResult."""

    def test_empty(self):
        """Test every bucket of an empty result is empty."""
        result = ClassificationResult.empty()
        assert result.model_dump() == {
            "my_tasks": [],
            "overdue": [],
            "due_today": [],
            "due_this_week": [],
            "completed": [],
            "unassigned": [],
            "all_tasks": [],
        }
