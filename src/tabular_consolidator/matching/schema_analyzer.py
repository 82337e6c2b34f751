"""Cross-source schema analysis.

Computes how raw column names are distributed across sources, which columns
look alike, and which pairs of sources share enough columns to be related.
"""

from collections.abc import Sequence

import structlog

from tabular_consolidator.config import ConsolidationConfig
from tabular_consolidator.matching.similarity import similarity
from tabular_consolidator.models import Relationship, SchemaAnalysis, SourceTable

logger = structlog.get_logger(__name__)


def distinct_columns(sources: Sequence[SourceTable]) -> list[str]:
    """Collect raw column names across sources in first-seen order.

    Args:
        sources: Source tables in input order.

    Returns:
        Deduplicated raw column names.
    """
    seen: dict[str, None] = {}
    for source in sources:
        for column in source.headers:
            seen.setdefault(column, None)
    return list(seen)


def column_frequency(sources: Sequence[SourceTable]) -> dict[str, int]:
    """Count in how many sources each raw column appears.

    A source counts a column when its header sample (first row) has it.

    Args:
        sources: Source tables in input order.

    Returns:
        Raw column name to number of sources, in first-seen order.
    """
    frequency: dict[str, int] = {}
    for source in sources:
        for column in source.header_sample:
            frequency[column] = frequency.get(column, 0) + 1
    return frequency


def find_similarity_groups(columns: Sequence[str], threshold: float) -> dict[str, list[str]]:
    """Group each column with the other columns it resembles.

    Args:
        columns: Distinct raw column names in first-seen order.
        threshold: Similarity a partner must exceed.

    Returns:
        Column to its similar columns; columns without partners are omitted.
    """
    groups: dict[str, list[str]] = {}
    for column in columns:
        similar = [
            other
            for other in columns
            if other != column and similarity(column, other) > threshold
        ]
        if similar:
            groups[column] = similar
    return groups


def find_relationships(
    sources: Sequence[SourceTable],
    threshold: float,
) -> list[Relationship]:
    """Find pairs of sources that share columns.

    A column of source A is shared with source B when B has a column equal to
    it ignoring case, or scoring above ``threshold``. Columns come from each
    source's header sample.

    Args:
        sources: Source tables in input order.
        threshold: Similarity a matching column must exceed.

    Returns:
        One relationship per source pair with at least one shared column.
    """
    relationships: list[Relationship] = []
    headers = [source.header_sample for source in sources]

    for i, source_a in enumerate(sources):
        for j in range(i + 1, len(sources)):
            source_b = sources[j]
            headers_a, headers_b = headers[i], headers[j]
            if not headers_a or not headers_b:
                continue

            common = [
                column
                for column in headers_a
                if any(
                    column.lower() == other.lower() or similarity(column, other) > threshold
                    for other in headers_b
                )
            ]
            if not common:
                continue

            confidence = min(1.0, len(common) / min(len(headers_a), len(headers_b)))
            relationships.append(
                Relationship(
                    source_a=source_a.source_id,
                    source_b=source_b.source_id,
                    common_columns=common,
                    confidence=confidence,
                )
            )

    return relationships


def analyze_schema(
    sources: Sequence[SourceTable],
    config: ConsolidationConfig | None = None,
) -> SchemaAnalysis:
    """Analyze column overlap across all sources.

    Args:
        sources: Source tables in input order.
        config: Thresholds; defaults to ``ConsolidationConfig()``.

    Returns:
        Column frequency, common/unique columns, similarity groups and
        source relationships.
    """
    config = config or ConsolidationConfig()

    frequency = column_frequency(sources)
    columns = distinct_columns(sources)

    analysis = SchemaAnalysis(
        column_frequency=frequency,
        common_columns=[column for column, count in frequency.items() if count > 1],
        similarity_groups=find_similarity_groups(columns, config.grouping_threshold),
        unique_columns=[column for column, count in frequency.items() if count == 1],
        relationships=find_relationships(sources, config.relationship_threshold),
    )

    logger.debug(
        "Schema analysis complete",
        columns=len(columns),
        common=len(analysis.common_columns),
        groups=len(analysis.similarity_groups),
        relationships=len(analysis.relationships),
    )

    return analysis
