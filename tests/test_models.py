"""Tests for Pydantic data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tabular_consolidator.models import (
    ConsolidatedResult,
    ConsolidationStrategy,
    Relationship,
    SourceTable,
)


class TestSourceTable:
    """Tests for the SourceTable model."""

    def test_headers_union_of_rows(self) -> None:
        table = SourceTable(source_id="a", rows=[{"ID": 1}, {"ID": 2, "Name": "x"}, {"Zip": None}])
        assert table.headers == ["ID", "Name", "Zip"]

    def test_header_sample_is_first_row(self) -> None:
        table = SourceTable(source_id="a", rows=[{"ID": 1}, {"ID": 2, "Extra": "x"}])
        assert table.header_sample == ["ID"]
        assert SourceTable(source_id="empty").header_sample == []

    def test_computed_counts(self) -> None:
        table = SourceTable(source_id="a", rows=[{"ID": 1, "Name": "x"}, {"ID": 2}])
        assert table.row_count == 2
        assert table.column_count == 2
        assert table.model_dump()["row_count"] == 2

    def test_defaults(self) -> None:
        table = SourceTable(source_id="empty")
        assert table.rows == []
        assert table.headers == []
        assert table.file_name is None

    def test_frozen(self) -> None:
        table = SourceTable(source_id="a")
        with pytest.raises(ValidationError):
            table.source_id = "b"

    def test_rows_must_be_mappings(self) -> None:
        with pytest.raises(ValidationError):
            SourceTable(source_id="a", rows=[["ID", 1]])

    def test_nulls_preserved(self) -> None:
        table = SourceTable(source_id="a", rows=[{"ID": 1, "Phone": None}])
        assert table.rows[0] == {"ID": 1, "Phone": None}


class TestResultModels:
    """Tests for result models."""

    def test_relationship_confidence_bounds(self) -> None:
        with pytest.raises(ValidationError):
            Relationship(source_a="a", source_b="b", confidence=1.5)

    def test_empty_result(self) -> None:
        result = ConsolidatedResult()
        assert result.is_empty
        assert result.primary_key is None
        assert result.strategy == ConsolidationStrategy.AGGREGATE
        assert result.diagnostics.record_count == 0

    def test_strategy_serializes_as_value(self) -> None:
        result = ConsolidatedResult(strategy=ConsolidationStrategy.LOOKUP)
        assert result.model_dump(mode="json")["strategy"] == "lookup"
