"""Schema reconciliation across source tables.

This package provides:
- Column-name similarity scoring (synonym table + Levenshtein fallback)
- Cross-source schema analysis (frequency, similarity groups, relationships)
- Canonical column naming and the raw-to-canonical column mapping
"""

from tabular_consolidator.matching.column_normalizer import (
    PHRASE_DISPLAY_NAMES,
    WORD_DISPLAY_NAMES,
    ColumnNameRegistry,
    build_column_mapping,
    canonical_column_name,
)
from tabular_consolidator.matching.schema_analyzer import (
    analyze_schema,
    column_frequency,
    distinct_columns,
    find_relationships,
    find_similarity_groups,
)
from tabular_consolidator.matching.similarity import (
    ABBREVIATIONS,
    SYNONYM_GROUPS,
    are_synonyms,
    canonical_words,
    is_similar,
    similarity,
    split_words,
)

__all__ = [
    # Similarity
    "ABBREVIATIONS",
    "SYNONYM_GROUPS",
    "are_synonyms",
    "canonical_words",
    "is_similar",
    "similarity",
    "split_words",
    # Schema analysis
    "analyze_schema",
    "column_frequency",
    "distinct_columns",
    "find_relationships",
    "find_similarity_groups",
    # Column naming
    "PHRASE_DISPLAY_NAMES",
    "WORD_DISPLAY_NAMES",
    "ColumnNameRegistry",
    "build_column_mapping",
    "canonical_column_name",
]
