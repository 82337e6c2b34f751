"""Pydantic models for the tabular consolidator.

This package contains:
- Source models (the tables handed to ``consolidate``)
- Result models (schema analysis, diagnostics, consolidated output)
"""

from tabular_consolidator.models.result import (
    ColumnMapping,
    ConsolidatedResult,
    ConsolidationDiagnostics,
    ConsolidationStrategy,
    Entity,
    Relationship,
    SchemaAnalysis,
    SimilarityGroups,
)
from tabular_consolidator.models.source import Row, SourceTable

__all__ = [
    # Source models
    "Row",
    "SourceTable",
    # Result models
    "ColumnMapping",
    "ConsolidatedResult",
    "ConsolidationDiagnostics",
    "ConsolidationStrategy",
    "Entity",
    "Relationship",
    "SchemaAnalysis",
    "SimilarityGroups",
]
