"""Pytest configuration and shared test fixtures.

This module provides fixtures for testing the tabular consolidator,
including small source tables, a deterministic result, and a mocked
OpenAI client.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from tabular_consolidator.config import EnrichmentConfig
from tabular_consolidator.consolidator import consolidate
from tabular_consolidator.models import ConsolidatedResult, SourceTable

# =============================================================================
# SOURCE TABLE FIXTURES
# =============================================================================


@pytest.fixture
def crm_source() -> SourceTable:
    """Provide a contact sheet keyed by ``CustID``.

    Returns:
        Two customers with names only.
    """
    return SourceTable(
        source_id="crm.xlsx:Customers",
        rows=[
            {"CustID": "1", "Name": "Acme"},
            {"CustID": "2", "Name": "Globex"},
        ],
        file_name="crm.xlsx",
        sheet_name="Customers",
    )


@pytest.fixture
def billing_source() -> SourceTable:
    """Provide a financial sheet keyed by ``CustomerID``.

    Returns:
        Two customers with revenue strings, one shared with ``crm_source``.
    """
    return SourceTable(
        source_id="billing.xlsx:Revenue",
        rows=[
            {"CustomerID": "1", "Revenue": "$1,200"},
            {"CustomerID": "3", "Revenue": "$500"},
        ],
        file_name="billing.xlsx",
        sheet_name="Revenue",
    )


@pytest.fixture
def sample_sources(crm_source: SourceTable, billing_source: SourceTable) -> list[SourceTable]:
    """Provide the two-sheet customer scenario."""
    return [crm_source, billing_source]


@pytest.fixture
def sample_result(sample_sources: list[SourceTable]) -> ConsolidatedResult:
    """Provide the deterministic consolidation of ``sample_sources``."""
    return consolidate(sample_sources)


# =============================================================================
# OPENAI MOCKS
# =============================================================================


def make_completion(content: str | None) -> MagicMock:
    """Build an object shaped like a chat completion response.

    Args:
        content: Message content of the single choice.

    Returns:
        Mock with ``choices[0].message.content`` set.
    """
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def make_openai_client(content: str | dict[str, Any] | list[Any] | None) -> MagicMock:
    """Build an AsyncOpenAI stand-in whose completions return ``content``.

    Args:
        content: Response text; dicts and lists are JSON-encoded.

    Returns:
        Mock client with an ``AsyncMock`` ``chat.completions.create``.
    """
    if isinstance(content, dict | list):
        content = json.dumps(content)
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion(content))
    return client


@pytest.fixture
def enrichment_config() -> EnrichmentConfig:
    """Provide an enrichment config with a fake API key."""
    return EnrichmentConfig(api_key="sk-test", model="gpt-4o-mini")


@pytest.fixture
def enrichment_response() -> dict[str, Any]:
    """Provide a well-formed enrichment response that leaks provenance fields.

    Returns:
        Response dict in the camelCase shape the prompt asks for.
    """
    return {
        "summary": "Three customers across two sheets.",
        "insights": ["Acme is the only customer with both name and revenue"],
        "recommendations": ["Fill in missing revenue"],
        "consolidatedHeaders": ["Customer ID", "Name", "Revenue", "Source_File"],
        "mergedData": [
            {"Customer ID": "1", "Name": "Acme", "Revenue": 1200.0, "Source_File": "crm.xlsx"},
            {"Customer ID": "2", "Name": "Globex", "Original Row": 2},
            {"Customer ID": "3", "Revenue": 500.0, "sourceSheet": "Revenue"},
        ],
    }


@pytest.fixture
def openai_client_factory():
    """Provide ``make_openai_client`` to tests that need a mocked client."""
    return make_openai_client
