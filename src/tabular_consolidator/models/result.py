"""Models describing schema analysis and the consolidated output.

These are built fresh inside one ``consolidate`` call and handed to the
caller, who owns them exclusively.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

Entity = dict[str, Any]
ColumnMapping = dict[str, str]
SimilarityGroups = dict[str, list[str]]


class ConsolidationStrategy(str, Enum):
    """How the sources relate to each other, as judged from their schemas."""

    MERGE = "merge"
    UNION = "union"
    LOOKUP = "lookup"
    AGGREGATE = "aggregate"


class Relationship(BaseModel):
    """Column overlap between two sources.

    Attributes:
        source_a: First source id (earlier in input order).
        source_b: Second source id.
        common_columns: Raw columns of ``source_a`` that match a column of ``source_b``.
        confidence: ``len(common_columns) / min(len(headers_a), len(headers_b))``.
    """

    source_a: str
    source_b: str
    common_columns: list[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)


class SchemaAnalysis(BaseModel):
    """Cross-source column statistics.

    Attributes:
        column_frequency: Number of sources each raw column appears in.
        common_columns: Raw columns appearing in more than one source.
        similarity_groups: Representative column to its similar columns.
        unique_columns: Raw columns appearing in exactly one source.
        relationships: Pairwise source overlaps with at least one common column.
    """

    column_frequency: dict[str, int] = Field(default_factory=dict)
    common_columns: list[str] = Field(default_factory=list)
    similarity_groups: SimilarityGroups = Field(default_factory=dict)
    unique_columns: list[str] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)


class ConsolidationDiagnostics(BaseModel):
    """Counts describing one consolidation run."""

    source_count: int = 0
    total_rows: int = 0
    raw_column_count: int = 0
    distinct_columns: int = 0
    record_count: int = 0
    rows_skipped: int = 0
    rows_merged: int = 0
    conflicts_resolved: int = 0
    composite_keys: int = 0
    enriched: bool = False


class ConsolidatedResult(BaseModel):
    """The consolidated table plus metadata about how it was produced.

    Attributes:
        records: One entity per resolved identifier, in first-seen order.
        headers: Canonical column names in first-appearance order.
        primary_key: Canonical name of the detected key column, if any.
        strategy: Strategy suggested by the schema overlap.
        summary: Human-readable description of the run.
        insights: Observations about the data.
        recommendations: Suggested data-quality follow-ups.
        column_mapping: Raw column name to canonical column name.
        analysis: Schema analysis the run was based on.
        diagnostics: Run counts.
    """

    records: list[Entity] = Field(default_factory=list)
    headers: list[str] = Field(default_factory=list)
    primary_key: str | None = None
    strategy: ConsolidationStrategy = ConsolidationStrategy.AGGREGATE
    summary: str = ""
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    column_mapping: ColumnMapping = Field(default_factory=dict)
    analysis: SchemaAnalysis = Field(default_factory=SchemaAnalysis)
    diagnostics: ConsolidationDiagnostics = Field(default_factory=ConsolidationDiagnostics)

    @property
    def is_empty(self) -> bool:
        """Whether no records were produced."""
        return not self.records
