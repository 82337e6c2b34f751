"""Consolidation orchestrator.

Runs the deterministic engine end to end:

1. Validate the sources
2. Analyze the schema (frequency, similarity groups, relationships)
3. Build the raw-to-canonical column mapping
4. Detect the primary key
5. Merge rows into entities
6. Derive headers, strategy, summary and diagnostics

Usage:
    from tabular_consolidator import SourceTable, consolidate

    result = consolidate([
        SourceTable(source_id="crm", rows=[{"CustID": "1", "Name": "Acme"}]),
        SourceTable(source_id="billing", rows=[{"CustomerID": "1", "Revenue": "$1,200"}]),
    ])
    print(result.records)  # [{'Customer ID': '1', 'Name': 'Acme', 'Revenue': 1200.0}]

The engine is pure and synchronous; concurrent calls on different inputs
need no synchronization.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from tabular_consolidator.config import ConsolidationConfig
from tabular_consolidator.exceptions import DuplicateSourceError, InvalidSourceError
from tabular_consolidator.matching import analyze_schema, build_column_mapping
from tabular_consolidator.merging import EntityMerger, detect_primary_key
from tabular_consolidator.models import (
    ConsolidatedResult,
    ConsolidationDiagnostics,
    ConsolidationStrategy,
    Entity,
    SchemaAnalysis,
    SourceTable,
)

logger = structlog.get_logger(__name__)


def coerce_sources(sources: Iterable[Any]) -> list[SourceTable]:
    """Validate consolidation inputs, fail-fast.

    Accepts SourceTable instances or mappings with ``source_id`` and ``rows``.

    Args:
        sources: Candidate source tables.

    Returns:
        Validated source tables in input order.

    Raises:
        InvalidSourceError: If a source or one of its rows has the wrong shape.
        DuplicateSourceError: If two sources share a source_id.
    """
    if isinstance(sources, (str, bytes, Mapping)) or not isinstance(sources, Iterable):
        raise InvalidSourceError("<sources>", "expected a sequence of source tables")

    tables: list[SourceTable] = []
    seen_ids: set[str] = set()

    for position, source in enumerate(sources):
        if isinstance(source, SourceTable):
            table = source
            for row_index, row in enumerate(table.rows):
                if not isinstance(row, Mapping):
                    msg = f"row {row_index} is {type(row).__name__}, not a mapping"
                    raise InvalidSourceError(table.source_id, msg)
        elif isinstance(source, Mapping):
            try:
                table = SourceTable.model_validate(source)
            except ValidationError as e:
                label = str(source.get("source_id", f"#{position}"))
                raise InvalidSourceError(label, str(e)) from e
        else:
            msg = f"expected SourceTable or mapping, got {type(source).__name__}"
            raise InvalidSourceError(f"#{position}", msg)

        if table.source_id in seen_ids:
            raise DuplicateSourceError(table.source_id)
        seen_ids.add(table.source_id)
        tables.append(table)

    return tables


def choose_strategy(
    analysis: SchemaAnalysis,
    source_count: int,
    config: ConsolidationConfig,
) -> ConsolidationStrategy:
    """Suggest how the sources relate, from their column overlap.

    Args:
        analysis: Schema analysis of the sources.
        source_count: Number of sources.
        config: Strategy thresholds.

    Returns:
        ``merge`` when many columns are shared, ``lookup`` when two sources are
        strongly related, ``union`` when a few columns are shared, otherwise
        ``aggregate``.
    """
    common = len(analysis.common_columns)
    if common > config.merge_ratio * source_count:
        return ConsolidationStrategy.MERGE
    if any(rel.confidence > config.lookup_confidence for rel in analysis.relationships):
        return ConsolidationStrategy.LOOKUP
    if common > config.union_min_common:
        return ConsolidationStrategy.UNION
    return ConsolidationStrategy.AGGREGATE


def collect_headers(records: Sequence[Entity]) -> list[str]:
    """Union of record keys in first-appearance order."""
    seen: dict[str, None] = {}
    for record in records:
        for column in record:
            seen.setdefault(column, None)
    return list(seen)


def describe(
    diagnostics: ConsolidationDiagnostics,
    analysis: SchemaAnalysis,
    primary_key: str | None,
    strategy: ConsolidationStrategy,
) -> tuple[str, list[str], list[str]]:
    """Write the summary, insights and recommendations for a run.

    Args:
        diagnostics: Run counts.
        analysis: Schema analysis of the sources.
        primary_key: Detected key column, if any.
        strategy: Chosen strategy.

    Returns:
        Tuple of (summary, insights, recommendations).
    """
    key_clause = f"keyed on '{primary_key}'" if primary_key else "using composite keys"
    summary = (
        f"Consolidated {diagnostics.source_count} source(s) with "
        f"{diagnostics.distinct_columns} distinct column(s) and "
        f"{diagnostics.total_rows} row(s) into {diagnostics.record_count} record(s), "
        f"{key_clause} ({strategy.value} strategy)."
    )

    insights = [
        f"Found {diagnostics.source_count} source table(s) with "
        f"{diagnostics.total_rows} total row(s)",
        f"Reconciled {diagnostics.raw_column_count} raw column name(s) into "
        f"{diagnostics.distinct_columns} canonical column(s)",
    ]
    if analysis.common_columns:
        insights.append(f"Columns shared by several sources: {', '.join(analysis.common_columns)}")
    if analysis.relationships:
        strongest = max(analysis.relationships, key=lambda rel: rel.confidence)
        insights.append(
            f"Strongest relationship: {strongest.source_a} and {strongest.source_b} "
            f"share {len(strongest.common_columns)} column(s) "
            f"(confidence {strongest.confidence:.2f})"
        )
    if primary_key:
        insights.append(f"'{primary_key}' identifies records across sources")
    else:
        insights.append("No column was unique enough to act as a primary key")
    if diagnostics.rows_merged:
        insights.append(f"{diagnostics.rows_merged} row(s) were merged into existing records")

    recommendations = []
    if diagnostics.raw_column_count > diagnostics.distinct_columns:
        recommendations.append("Standardize column naming conventions across all sheets")
    if not primary_key:
        recommendations.append("Add a shared identifier column to every sheet")
    if diagnostics.conflicts_resolved:
        recommendations.append(
            f"Review {diagnostics.conflicts_resolved} field conflict(s) resolved automatically"
        )
    if diagnostics.rows_skipped:
        recommendations.append(f"Remove {diagnostics.rows_skipped} empty row(s) from the sources")
    recommendations.append("Review merged data for duplicates and inconsistencies")

    return summary, insights, recommendations


def consolidate(
    sources: Iterable[SourceTable | Mapping[str, Any]],
    config: ConsolidationConfig | None = None,
) -> ConsolidatedResult:
    """Consolidate several source tables into one table of merged entities.

    Args:
        sources: Source tables (or mappings with ``source_id`` and ``rows``).
        config: Engine thresholds; defaults to ``ConsolidationConfig()``.

    Returns:
        The consolidated result. An empty input yields empty records and
        headers and no primary key.

    Raises:
        InvalidSourceError: If an input is not a table of mapping rows.
        DuplicateSourceError: If two inputs share a source_id.
    """
    config = config or ConsolidationConfig()
    tables = coerce_sources(sources)

    analysis = analyze_schema(tables, config)
    column_mapping = build_column_mapping(tables, analysis.similarity_groups)
    primary_key = detect_primary_key(tables, column_mapping, config)

    merger = EntityMerger(column_mapping, primary_key, config.composite_value_limit)
    records = merger.merge(tables)
    headers = collect_headers(records)
    strategy = choose_strategy(analysis, len(tables), config)

    diagnostics = ConsolidationDiagnostics(
        source_count=len(tables),
        total_rows=sum(table.row_count for table in tables),
        raw_column_count=len(column_mapping),
        distinct_columns=len(headers),
        record_count=len(records),
        rows_skipped=merger.stats["rows_skipped"],
        rows_merged=merger.stats["rows_merged"],
        conflicts_resolved=merger.stats["conflicts_resolved"],
        composite_keys=merger.stats["composite_keys"],
    )
    summary, insights, recommendations = describe(diagnostics, analysis, primary_key, strategy)

    logger.info(
        "Consolidation complete",
        sources=diagnostics.source_count,
        records=diagnostics.record_count,
        primary_key=primary_key,
        strategy=strategy.value,
    )

    return ConsolidatedResult(
        records=records,
        headers=headers,
        primary_key=primary_key,
        strategy=strategy,
        summary=summary,
        insights=insights,
        recommendations=recommendations,
        column_mapping=column_mapping,
        analysis=analysis,
        diagnostics=diagnostics,
    )
