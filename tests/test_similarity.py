"""Tests for column-name similarity scoring."""

from __future__ import annotations

import pytest

from tabular_consolidator.matching.similarity import (
    are_synonyms,
    canonical_words,
    is_similar,
    similarity,
    split_words,
)


class TestSplitWords:
    """Tests for splitting column names into words."""

    def test_camel_case(self) -> None:
        assert split_words("CustID") == ["Cust", "ID"]
        assert split_words("customerName") == ["customer", "Name"]

    def test_separators(self) -> None:
        assert split_words("order_line-item total") == ["order", "line", "item", "total"]

    def test_acronym_followed_by_word(self) -> None:
        assert split_words("HTTPStatus") == ["HTTP", "Status"]

    def test_digits_split(self) -> None:
        assert split_words("address2") == ["address", "2"]

    def test_empty_and_punctuation_only(self) -> None:
        assert split_words("") == []
        assert split_words("__--") == []


class TestSynonyms:
    """Tests for the synonym table."""

    def test_same_entry(self) -> None:
        assert are_synonyms("customer", "client") is True
        assert are_synonyms("email", "e-mail") is True

    def test_different_entries(self) -> None:
        assert are_synonyms("customer", "amount") is False

    def test_canonical_words_expand_abbreviations(self) -> None:
        assert canonical_words("CustID") == ("customer", "id")
        assert canonical_words("client_code") == ("customer", "id")
        assert canonical_words("Qty") == ("quantity",)


class TestSimilarity:
    """Tests for the similarity score."""

    def test_identical_names(self) -> None:
        assert similarity("Revenue", "Revenue") == 1.0

    def test_case_insensitive(self) -> None:
        assert similarity("EMAIL", "email") == 1.0

    def test_both_empty(self) -> None:
        assert similarity("", "") == 1.0

    def test_one_empty(self) -> None:
        assert similarity("", "Name") == 0.0

    def test_whole_name_synonyms(self) -> None:
        assert similarity("Price", "Cost") == 1.0
        assert similarity("Email", "E-mail") == 1.0

    def test_customer_client_synonym_triggers_grouping(self) -> None:
        """'Customer Name' and 'Client Name' must clear the grouping threshold."""
        assert similarity("Customer Name", "Client Name") > 0.6

    def test_abbreviated_and_full_id_columns(self) -> None:
        assert similarity("CustID", "CustomerID") == 1.0

    def test_levenshtein_fallback(self) -> None:
        assert similarity("Revenue", "Revenues") == pytest.approx(0.875)
        assert similarity("abc", "xyz") == 0.0

    def test_score_in_unit_interval(self) -> None:
        score = similarity("Shipping Address", "Ship To")
        assert 0.0 <= score <= 1.0

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("Customer Name", "Client Name"),
            ("CustID", "CustomerID"),
            ("Revenue", "Revenues"),
            ("Order Date", "Date"),
            ("", "Name"),
            ("Phone", "mobile_no"),
        ],
    )
    def test_symmetric(self, a: str, b: str) -> None:
        assert similarity(a, b) == similarity(b, a)

    def test_is_similar_is_strict(self) -> None:
        assert is_similar("Revenue", "Revenues", 0.8) is True
        assert is_similar("Revenue", "Revenue", 1.0) is False
