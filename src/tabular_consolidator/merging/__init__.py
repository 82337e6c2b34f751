"""Row-level reconciliation: value normalization, key detection, entity merging.

This package provides:
- Cell value normalization driven by the column name's role
- Primary-key detection from naming heuristics and value uniqueness
- Horizontal entity merging with field-level conflict resolution
"""

from tabular_consolidator.merging.entity_merger import (
    COMPOSITE_KEY_FIELDS,
    EntityMerger,
    key_string,
    merge_entities,
    resolve_conflict,
)
from tabular_consolidator.merging.primary_key import (
    NAMING_SCORES,
    KeyCandidate,
    detect_primary_key,
    naming_score,
    score_key_candidates,
    uniqueness_ratio,
)
from tabular_consolidator.merging.value_normalizer import (
    AMOUNT_KEYWORDS,
    AMOUNT_WORDS,
    DATE_KEYWORDS,
    INTEGER_KEYWORDS,
    is_null,
    is_number,
    normalize_value,
    parse_amount,
    parse_date,
    parse_integer,
)

__all__ = [
    # Value normalization
    "AMOUNT_KEYWORDS",
    "AMOUNT_WORDS",
    "DATE_KEYWORDS",
    "INTEGER_KEYWORDS",
    "is_null",
    "is_number",
    "normalize_value",
    "parse_amount",
    "parse_date",
    "parse_integer",
    # Primary key
    "NAMING_SCORES",
    "KeyCandidate",
    "detect_primary_key",
    "naming_score",
    "score_key_candidates",
    "uniqueness_ratio",
    # Entity merging
    "COMPOSITE_KEY_FIELDS",
    "EntityMerger",
    "key_string",
    "merge_entities",
    "resolve_conflict",
]
