"""Tests for canonical column naming and the column mapping."""

from __future__ import annotations

import pytest

from tabular_consolidator.matching.column_normalizer import (
    ColumnNameRegistry,
    build_column_mapping,
    canonical_column_name,
)
from tabular_consolidator.matching.schema_analyzer import (
    distinct_columns,
    find_similarity_groups,
)
from tabular_consolidator.models import SourceTable


class TestCanonicalColumnName:
    """Tests for display-name derivation."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("CustID", "Customer ID"),
            ("customer_id", "Customer ID"),
            ("client_name", "Customer Name"),
            ("orderDate", "Order Date"),
            ("unit-price", "Unit Price"),
            ("e-mail", "Email"),
            ("E_Mail", "Email"),
            ("qty", "Quantity"),
            ("  revenue  ", "Revenue"),
            ("SKU", "SKU"),
        ],
    )
    def test_known_names(self, raw: str, expected: str) -> None:
        assert canonical_column_name(raw) == expected

    def test_no_word_characters_falls_back(self) -> None:
        assert canonical_column_name(" # ") == "#"
        assert canonical_column_name("   ") == "Column"


class TestColumnNameRegistry:
    """Tests for collision suffixing."""

    def test_suffixes_collisions(self) -> None:
        registry = ColumnNameRegistry()
        assert [registry.claim("Name") for _ in range(3)] == ["Name", "Name 2", "Name 3"]

    def test_distinct_names_untouched(self) -> None:
        registry = ColumnNameRegistry()
        assert registry.claim("Name") == "Name"
        assert registry.claim("Email") == "Email"


class TestBuildColumnMapping:
    """Tests for the raw-to-canonical mapping."""

    def test_group_members_share_name(self, sample_sources: list[SourceTable]) -> None:
        groups = {"CustID": ["CustomerID"], "CustomerID": ["CustID"]}
        mapping = build_column_mapping(sample_sources, groups)

        assert mapping == {
            "CustID": "Customer ID",
            "CustomerID": "Customer ID",
            "Name": "Name",
            "Revenue": "Revenue",
        }

    def test_mapping_is_total(self) -> None:
        sources = [
            SourceTable(source_id="a", rows=[{"A": 1}, {"B": 2}]),
            SourceTable(source_id="b", rows=[{"C": 3}]),
        ]
        assert set(build_column_mapping(sources, {})) == {"A", "B", "C"}

    def test_unrelated_collisions_get_suffix(self) -> None:
        """Two raw names that canonicalize alike but were not grouped stay apart."""
        sources = [
            SourceTable(source_id="a", rows=[{"order_date": "2024-01-01"}]),
            SourceTable(source_id="b", rows=[{"OrderDate": "2024-01-02"}]),
        ]
        mapping = build_column_mapping(sources, {})

        assert mapping == {"order_date": "Order Date", "OrderDate": "Order Date 2"}

    def test_overlapping_groups_share_one_name(self) -> None:
        """Columns linked through a shared partner end up under one name."""
        sources = [SourceTable(source_id="a", rows=[{"Name": 1, "Title": 2, "Label": 3}])]
        groups = {"Name": ["Title"], "Title": ["Name", "Label"], "Label": ["Title"]}
        mapping = build_column_mapping(sources, groups)

        assert mapping == {"Name": "Name", "Title": "Name", "Label": "Name"}

    def test_similarity_chain_is_transitive(self) -> None:
        """A chain of similar pairs maps to one name even when its ends differ."""
        sources = [
            SourceTable(source_id="a", rows=[{"abcdef": 1}]),
            SourceTable(source_id="b", rows=[{"abcdxy": 2}]),
            SourceTable(source_id="c", rows=[{"abwzxy": 3}]),
        ]
        groups = find_similarity_groups(distinct_columns(sources), 0.6)
        assert "abwzxy" not in groups["abcdef"]

        mapping = build_column_mapping(sources, groups)

        assert set(mapping.values()) == {"Abcdef"}

    def test_separate_classes_get_separate_names(self) -> None:
        row = {"Alpha": 1, "Alphb": 2, "Zeta": 3, "Zetb": 4}
        sources = [SourceTable(source_id="a", rows=[row])]
        groups = {"Alpha": ["Alphb"], "Alphb": ["Alpha"], "Zeta": ["Zetb"], "Zetb": ["Zeta"]}
        mapping = build_column_mapping(sources, groups)

        assert mapping == {"Alpha": "Alpha", "Alphb": "Alpha", "Zeta": "Zeta", "Zetb": "Zeta"}

    def test_canonical_names_unique_per_group(self) -> None:
        sources = [SourceTable(source_id="a", rows=[{"Name": 1, "name ": 2, "Email": 3}])]
        mapping = build_column_mapping(sources, {})
        assert len(set(mapping.values())) == 3
