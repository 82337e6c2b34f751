"""Entity merging across sources.

Folds the rows of every source into one record per real-world entity. Each
row is mapped to canonical columns, its values normalized, and an entity
identifier computed from the primary key (or a synthesized composite key).
Rows sharing an identifier are merged horizontally: the entity gains the
union of their fields, and conflicting values are resolved field by field.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from tabular_consolidator.merging.value_normalizer import is_number, normalize_value
from tabular_consolidator.models import Entity, SourceTable

logger = structlog.get_logger(__name__)

# Canonical columns tried, in order, for a composite key.
COMPOSITE_KEY_FIELDS: tuple[str, ...] = ("Name", "ID", "Code", "Title", "Email", "Phone")

COMPOSITE_VALUE_LIMIT = 3


def key_string(value: Any) -> str:
    """Render an identifier value as a string.

    Integral floats drop their ``.0`` so ``1`` and ``1.0`` identify the same
    entity.

    Args:
        value: Normalized identifier value.

    Returns:
        String form of the value.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_blank(value: Any) -> bool:
    """Check whether a merged field holds nothing usable."""
    return value is None or value == ""


def resolve_conflict(existing: Any, incoming: Any) -> Any:
    """Choose between two values for the same field of one entity.

    Args:
        existing: Value already held by the entity.
        incoming: Value from the record being merged in.

    Returns:
        ``incoming`` when the entity holds nothing; the longer string when
        both are strings; ``incoming`` when it is a number; otherwise
        ``existing``.

    Example:
        >>> resolve_conflict("Jo", "Jonathan")
        'Jonathan'
        >>> resolve_conflict("5", 7)
        7
        >>> resolve_conflict(7, "seven")
        7
    """
    if is_blank(existing):
        return incoming
    if existing == incoming:
        return existing
    if isinstance(existing, str) and isinstance(incoming, str):
        return incoming if len(incoming) > len(existing) else existing
    if is_number(incoming):
        return incoming
    return existing


class EntityMerger:
    """Merges rows from many sources into one record per entity.

    The entity map lives only for the duration of one ``merge`` call, so a
    merger can be reused and instances never share state.

    Example:
        >>> merger = EntityMerger({"CustID": "Customer ID"}, primary_key="Customer ID")
        >>> entities = merger.merge(sources)
        >>> print(f"{merger.stats['rows_merged']} rows folded into existing entities")

    Attributes:
        column_mapping: Raw column name to canonical column name.
        primary_key: Canonical key column, or None to always use composite keys.
        composite_value_limit: Values used for a generic composite key.
        stats: Counts from the most recent ``merge`` call.
    """

    def __init__(
        self,
        column_mapping: Mapping[str, str],
        primary_key: str | None = None,
        composite_value_limit: int = COMPOSITE_VALUE_LIMIT,
    ) -> None:
        """Initialize the merger.

        Args:
            column_mapping: Raw column name to canonical column name.
            primary_key: Canonical key column, or None.
            composite_value_limit: Values used for a generic composite key.
        """
        self.column_mapping = column_mapping
        self.primary_key = primary_key
        self.composite_value_limit = composite_value_limit
        self.stats: dict[str, int] = {}

    def merge(self, sources: Sequence[SourceTable]) -> list[Entity]:
        """Merge all rows of all sources into entities.

        Args:
            sources: Source tables in input order.

        Returns:
            Entities in first-seen identifier order.
        """
        stats = {
            "rows_processed": 0,
            "rows_skipped": 0,
            "rows_merged": 0,
            "conflicts_resolved": 0,
            "composite_keys": 0,
        }
        entities: dict[str, Entity] = {}

        for source_index, source in enumerate(sources):
            for row_index, row in enumerate(source.rows):
                stats["rows_processed"] += 1

                record = self._build_record(row, stats)
                if not record:
                    stats["rows_skipped"] += 1
                    continue

                identifier = self._identifier(record, source_index, row_index, stats)

                existing = entities.get(identifier)
                if existing is None:
                    entities[identifier] = record
                else:
                    self._merge_into(existing, record, stats)
                    stats["rows_merged"] += 1

        self.stats = stats

        logger.info(
            "Entity merge complete",
            entities=len(entities),
            rows=stats["rows_processed"],
            merged=stats["rows_merged"],
            skipped=stats["rows_skipped"],
            composite_keys=stats["composite_keys"],
        )

        return list(entities.values())

    def _build_record(self, row: Mapping[str, Any], stats: dict[str, int]) -> Entity:
        """Map a raw row to canonical columns with normalized, non-null values.

        Args:
            row: Raw row keyed by raw column name.
            stats: Counters to update.

        Returns:
            The candidate record (possibly empty).
        """
        record: Entity = {}
        for raw_name, raw_value in row.items():
            value = normalize_value(raw_value, raw_name)
            if value is None:
                continue
            column = self.column_mapping.get(raw_name, raw_name)
            if column in record:
                self._merge_field(record, column, value, stats)
            else:
                record[column] = value
        return record

    def _identifier(
        self,
        record: Entity,
        source_index: int,
        row_index: int,
        stats: dict[str, int],
    ) -> str:
        """Compute the entity identifier of a record.

        Args:
            record: Normalized record.
            source_index: Position of the record's source.
            row_index: Position of the record's row within its source.
            stats: Counters to update.

        Returns:
            The primary-key value, or a composite key.
        """
        if self.primary_key is not None:
            key_value = record.get(self.primary_key)
            if key_value is not None:
                identifier = key_string(key_value)
                if identifier:
                    return identifier

        stats["composite_keys"] += 1
        return self._composite_key(record, source_index, row_index)

    def _composite_key(self, record: Entity, source_index: int, row_index: int) -> str:
        """Synthesize an identifier for a record without a primary-key value.

        Uses the first present well-known identifying column; failing that,
        the first few values of the record; failing that, a key unique to the
        row so it never collides with an unrelated record.

        Args:
            record: Normalized record.
            source_index: Position of the record's source.
            row_index: Position of the record's row within its source.

        Returns:
            Composite identifier.
        """
        for field_name in COMPOSITE_KEY_FIELDS:
            value = record.get(field_name)
            if value is not None:
                text = key_string(value)
                if text:
                    return f"{field_name}={text}"

        parts = [key_string(value) for value in record.values()]
        parts = [part for part in parts if part][: self.composite_value_limit]
        if parts:
            return "|".join(parts)

        return f"row:{source_index}:{row_index}"

    def _merge_into(self, entity: Entity, record: Entity, stats: dict[str, int]) -> None:
        """Merge a new record into an accumulated entity in place."""
        for column, value in record.items():
            self._merge_field(entity, column, value, stats)

    @staticmethod
    def _merge_field(entity: Entity, column: str, value: Any, stats: dict[str, int]) -> None:
        """Set one field of an entity, resolving a conflict if there is one."""
        existing = entity.get(column)
        if not is_blank(existing) and existing != value:
            stats["conflicts_resolved"] += 1
        entity[column] = resolve_conflict(existing, value)


def merge_entities(
    sources: Sequence[SourceTable],
    column_mapping: Mapping[str, str],
    primary_key: str | None = None,
) -> list[Entity]:
    """Merge all rows of all sources into one record per entity.

    Args:
        sources: Source tables in input order.
        column_mapping: Raw column name to canonical column name.
        primary_key: Canonical key column, or None to use composite keys.

    Returns:
        Entities in first-seen identifier order.
    """
    return EntityMerger(column_mapping, primary_key).merge(sources)
