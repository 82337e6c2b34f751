"""Tabular Consolidator.

Merges several loosely-related tables (the sheets of uploaded spreadsheets)
into one table of entities: similar column names are unified under canonical
display names, a primary key is detected, and rows describing the same
entity are merged field by field.

Usage:
    from tabular_consolidator import consolidate, load_sources, encode_workbook

    # Deterministic consolidation
    sources = load_sources(["customers.xlsx", "orders.csv"])
    result = consolidate(sources)

    # Plain dictionaries work too
    result = consolidate([
        {"source_id": "a", "rows": [{"CustID": "C1", "Email": "x@y.z"}]},
        {"source_id": "b", "rows": [{"CustomerID": "C1", "Phone": "555-0100"}]},
    ])

    # Export
    content = encode_workbook(result.records, result.headers)

    # Optional LLM review (falls back to the deterministic result):
    import asyncio
    from tabular_consolidator import ConsolidationEnricher
    result = asyncio.run(ConsolidationEnricher().enrich(sources, result))
"""

# =============================================================================
# CONFIGURATION
# =============================================================================
from .config import ConsolidationConfig, EnrichmentConfig

# =============================================================================
# ORCHESTRATION
# =============================================================================
from .consolidator import choose_strategy, coerce_sources, consolidate

# =============================================================================
# LLM ENRICHMENT (optional, needs OPENAI_API_KEY at call time)
# =============================================================================
from .enrichment import ConsolidationEnricher, ReportAssistant

# =============================================================================
# EXCEPTIONS
# =============================================================================
from .exceptions import (
    ConsolidationError,
    DuplicateSourceError,
    EnrichmentConfigError,
    EnrichmentError,
    IngestionError,
    InvalidSourceError,
)

# =============================================================================
# INGESTION AND ENCODING
# =============================================================================
from .exporters import encode_workbook, result_to_json, write_workbook
from .loaders import load_csv_source, load_sources, load_workbook_sources

# Column matching
from .matching import (
    analyze_schema,
    build_column_mapping,
    canonical_column_name,
    similarity,
)

# Entity merging
from .merging import (
    EntityMerger,
    detect_primary_key,
    merge_entities,
    normalize_value,
)

# =============================================================================
# MODELS
# =============================================================================
from .models import (
    ConsolidatedResult,
    ConsolidationDiagnostics,
    ConsolidationStrategy,
    Relationship,
    SchemaAnalysis,
    SourceTable,
)

__version__ = "0.1.0"

__all__ = [
    # ==========================================================================
    # MODELS
    # ==========================================================================
    "SourceTable",
    "ConsolidatedResult",
    "ConsolidationDiagnostics",
    "ConsolidationStrategy",
    "Relationship",
    "SchemaAnalysis",
    # ==========================================================================
    # ENGINE
    # ==========================================================================
    "ConsolidationConfig",
    "consolidate",
    "coerce_sources",
    "choose_strategy",
    # Column matching
    "similarity",
    "analyze_schema",
    "canonical_column_name",
    "build_column_mapping",
    # Entity merging
    "normalize_value",
    "detect_primary_key",
    "EntityMerger",
    "merge_entities",
    # ==========================================================================
    # INGESTION AND ENCODING
    # ==========================================================================
    "load_sources",
    "load_workbook_sources",
    "load_csv_source",
    "encode_workbook",
    "write_workbook",
    "result_to_json",
    # ==========================================================================
    # LLM ENRICHMENT
    # ==========================================================================
    "EnrichmentConfig",
    "ConsolidationEnricher",
    "ReportAssistant",
    # ==========================================================================
    # EXCEPTIONS
    # ==========================================================================
    "ConsolidationError",
    "InvalidSourceError",
    "DuplicateSourceError",
    "IngestionError",
    "EnrichmentError",
    "EnrichmentConfigError",
]
