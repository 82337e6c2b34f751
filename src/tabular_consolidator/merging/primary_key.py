"""Primary-key detection.

Scores every canonical column by how much its raw names look like an
identifier and by how unique its values are within each source, and picks
the best eligible column.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import structlog

from tabular_consolidator.config import ConsolidationConfig
from tabular_consolidator.merging.value_normalizer import is_null
from tabular_consolidator.models import SourceTable

logger = structlog.get_logger(__name__)

# Substring to naming score. Matches are additive.
NAMING_SCORES: tuple[tuple[str, int], ...] = (
    ("id", 15),
    ("key", 12),
    ("code", 10),
    ("name", 8),
    ("ref", 7),
    ("number", 5),
)

UNIQUENESS_WEIGHT = 20


@dataclass
class KeyCandidate:
    """Scores collected for one canonical column.

    Attributes:
        column: Canonical column name.
        naming_score: Best naming score over its raw names.
        uniqueness: Best per-source uniqueness ratio.
    """

    column: str
    naming_score: int = 0
    uniqueness: float = 0.0

    @property
    def score(self) -> float:
        """Combined score used to rank candidates."""
        return self.naming_score + self.uniqueness * UNIQUENESS_WEIGHT


def naming_score(raw_name: str) -> int:
    """Score how much a raw column name looks like an identifier.

    Args:
        raw_name: Raw column name.

    Returns:
        Sum of the scores of the identifier words it contains. ``name`` does
        not count inside ``filename``; ``reference`` counts once, as ``ref``.

    Example:
        >>> naming_score("CustomerID")
        15
        >>> naming_score("Product Code Name")
        18
        >>> naming_score("filename")
        0
    """
    lowered = raw_name.lower()
    score = 0
    for keyword, points in NAMING_SCORES:
        if keyword not in lowered:
            continue
        if keyword == "name" and "filename" in lowered:
            continue
        score += points
    return score


def uniqueness_ratio(values: Sequence[object]) -> float:
    """Share of distinct values among the non-empty values.

    Args:
        values: Raw cell values of one column in one source.

    Returns:
        ``unique / total`` over non-empty values, or 0.0 if there are none.
    """
    present = [str(value).strip() for value in values if not is_null(value)]
    if not present:
        return 0.0
    return len(set(present)) / len(present)


def score_key_candidates(
    sources: Sequence[SourceTable],
    column_mapping: Mapping[str, str],
) -> list[KeyCandidate]:
    """Score every canonical column as a primary-key candidate.

    Args:
        sources: Source tables in input order.
        column_mapping: Raw column name to canonical column name.

    Returns:
        Candidates in first-seen canonical column order.
    """
    candidates: dict[str, KeyCandidate] = {}

    for source in sources:
        values_by_column: dict[str, list[object]] = {}
        for row in source.rows:
            for raw_name, value in row.items():
                canonical = column_mapping.get(raw_name, raw_name)
                values_by_column.setdefault(canonical, []).append(value)

        for raw_name in source.headers:
            canonical = column_mapping.get(raw_name, raw_name)
            candidate = candidates.setdefault(canonical, KeyCandidate(column=canonical))
            candidate.naming_score = max(candidate.naming_score, naming_score(raw_name))

        for canonical, values in values_by_column.items():
            candidate = candidates[canonical]
            candidate.uniqueness = max(candidate.uniqueness, uniqueness_ratio(values))

    return list(candidates.values())


def detect_primary_key(
    sources: Sequence[SourceTable],
    column_mapping: Mapping[str, str],
    config: ConsolidationConfig | None = None,
) -> str | None:
    """Pick the canonical column that best identifies entities.

    Args:
        sources: Source tables in input order.
        column_mapping: Raw column name to canonical column name.
        config: Thresholds; defaults to ``ConsolidationConfig()``.

    Returns:
        The eligible column with the highest combined score (earliest column on
        ties), or None if no column is unique enough.
    """
    config = config or ConsolidationConfig()

    best: KeyCandidate | None = None
    for candidate in score_key_candidates(sources, column_mapping):
        if candidate.uniqueness <= config.key_uniqueness_threshold:
            continue
        if best is None or candidate.score > best.score:
            best = candidate

    if best is None:
        logger.info("No primary key detected; composite keys will be used")
        return None

    logger.info(
        "Primary key detected",
        column=best.column,
        naming_score=best.naming_score,
        uniqueness=round(best.uniqueness, 3),
    )
    return best.column
