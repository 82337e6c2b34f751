"""Validation of LLM output before it may replace deterministic results.

LLM responses are parsed (markdown fences removed), shape-checked with
pydantic, and scrubbed of source-tracking fields such as "Source_File",
"Source Sheet" or "Original_Row": consolidated records describe entities,
not the rows they came from.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from tabular_consolidator.exceptions import EnrichmentError
from tabular_consolidator.matching.similarity import split_words

_TRACKING_RE = re.compile(r"\bsource (?:file|sheet)|\bsource row\b|\boriginal row\b")
_FENCE_RE = re.compile(r"```(?:json)?")


def is_source_tracking_key(key: str) -> bool:
    """Check whether a field name looks like row-provenance metadata.

    Args:
        key: Field name from an LLM-produced record.

    Returns:
        True for names such as ``Source_File``, ``sourceSheet`` or ``Original Row``.

    Example:
        >>> is_source_tracking_key("Source_File")
        True
        >>> is_source_tracking_key("Resource Filename")
        False
    """
    phrase = " ".join(word.lower() for word in split_words(key))
    return bool(_TRACKING_RE.search(phrase))


def strip_source_tracking(record: dict[str, Any]) -> dict[str, Any]:
    """Drop source-tracking fields from one record."""
    return {key: value for key, value in record.items() if not is_source_tracking_key(key)}


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences around a model response."""
    return _FENCE_RE.sub("", text).strip()


def _load_json(text: str) -> Any:
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        msg = f"Response is not valid JSON: {e}"
        raise EnrichmentError(msg) from e


def _clean_records(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    cleaned = [strip_source_tracking(record) for record in records]
    return [record for record in cleaned if record]


class EnrichmentPayload(BaseModel):
    """Shape of an enrichment response.

    Fields of the wrong type fall back to empty defaults instead of failing,
    and ``merged_data`` is only kept when it is an array of objects.

    Attributes:
        summary: Replacement summary text.
        insights: Observations about the data.
        recommendations: Suggested follow-ups.
        consolidated_headers: Proposed column order.
        merged_data: Proposed records.
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    summary: str | None = None
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    consolidated_headers: list[str] = Field(default_factory=list, alias="consolidatedHeaders")
    merged_data: list[dict[str, Any]] = Field(default_factory=list, alias="mergedData")

    @field_validator("summary", mode="before")
    @classmethod
    def _non_blank_summary(cls, value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @field_validator("insights", "recommendations", "consolidated_headers", mode="before")
    @classmethod
    def _string_list(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(item) for item in value if item is not None and str(item).strip()]

    @field_validator("merged_data", mode="before")
    @classmethod
    def _record_array(cls, value: Any) -> list[dict[str, Any]]:
        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            return []
        return value

    @model_validator(mode="after")
    def _drop_source_tracking(self) -> EnrichmentPayload:
        self.merged_data = _clean_records(self.merged_data)
        self.consolidated_headers = [
            header for header in self.consolidated_headers if not is_source_tracking_key(header)
        ]
        return self


def parse_enrichment_response(text: str) -> EnrichmentPayload:
    """Parse and validate an enrichment response.

    Args:
        text: Raw model output.

    Returns:
        The validated payload, scrubbed of source-tracking fields.

    Raises:
        EnrichmentError: If the output is not a JSON object.
    """
    data = _load_json(text)
    if not isinstance(data, dict):
        msg = f"Expected a JSON object, got {type(data).__name__}"
        raise EnrichmentError(msg)
    return EnrichmentPayload.model_validate(data)


def parse_record_array(text: str) -> list[dict[str, Any]]:
    """Parse a response that should hold an array of rows.

    Accepts a bare JSON array or an object with a ``rows`` array.

    Args:
        text: Raw model output.

    Returns:
        Rows scrubbed of source-tracking fields; rows left empty are dropped.

    Raises:
        EnrichmentError: If the output is not an array of objects.
    """
    data = _load_json(text)
    if isinstance(data, dict):
        data = data.get("rows")
    if not isinstance(data, list):
        msg = "Response does not contain an array of rows"
        raise EnrichmentError(msg)
    if not all(isinstance(row, dict) for row in data):
        msg = "Every row must be a JSON object"
        raise EnrichmentError(msg)
    return _clean_records(data)
