"""Source table model.

A SourceTable is one parsed sheet: an identifier plus an ordered list of
rows, each row a flat mapping from raw column name to raw cell value.
Column sets are only known at runtime, so rows stay plain dictionaries.
"""

from typing import Any

from pydantic import BaseModel, Field, computed_field

Row = dict[str, Any]


class SourceTable(BaseModel):
    """One independently-authored table to consolidate.

    Attributes:
        source_id: Identifier, unique among the inputs of one consolidation.
        rows: Ordered rows keyed by raw column name (nulls preserved).
        file_name: Originating file, when loaded from disk.
        sheet_name: Originating worksheet, when loaded from a workbook.
    """

    model_config = {"frozen": True}

    source_id: str = Field(description="Unique source identifier")
    rows: list[Row] = Field(default_factory=list, description="Rows keyed by raw column name")
    file_name: str | None = Field(default=None, description="Originating file name")
    sheet_name: str | None = Field(default=None, description="Originating worksheet name")

    @property
    def header_sample(self) -> list[str]:
        """Raw column names of the first row, the sheet's header as authored."""
        return list(self.rows[0]) if self.rows else []

    @property
    def headers(self) -> list[str]:
        """Ordered union of the raw column names of all rows, first row first."""
        seen: dict[str, None] = {}
        for row in self.rows:
            for column in row:
                seen.setdefault(column, None)
        return list(seen)

    @computed_field
    @property
    def row_count(self) -> int:
        """Number of rows in the table."""
        return len(self.rows)

    @computed_field
    @property
    def column_count(self) -> int:
        """Number of distinct raw columns in the table."""
        return len(self.headers)
