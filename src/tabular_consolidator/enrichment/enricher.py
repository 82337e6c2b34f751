"""Optional LLM enrichment layered over the deterministic result.

The deterministic ``ConsolidatedResult`` is always the source of truth. The
enricher offers the model a structural summary of the sources and the merge,
and accepts its proposal only after validation. Any failure (no API key, API
errors, exhausted retries, unparseable or malformed output) returns the
deterministic result unchanged.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import openai
import structlog
import tenacity

from tabular_consolidator.config import EnrichmentConfig
from tabular_consolidator.consolidator import collect_headers
from tabular_consolidator.enrichment.client import ChatCompleter
from tabular_consolidator.enrichment.prompts import ENRICHMENT_PROMPT
from tabular_consolidator.enrichment.validator import EnrichmentPayload, parse_enrichment_response
from tabular_consolidator.exceptions import EnrichmentError
from tabular_consolidator.models import ConsolidatedResult, SourceTable

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = structlog.get_logger(__name__)


def build_structure_summary(
    sources: Sequence[SourceTable],
    result: ConsolidatedResult,
    sample_rows: int = 5,
) -> dict[str, Any]:
    """Describe the sources and the deterministic merge for the model.

    Only headers and a few sample rows per source are included, to keep the
    prompt small.

    Args:
        sources: Source tables that were consolidated.
        result: Deterministic consolidation result.
        sample_rows: Rows per source (and merged records) to include.

    Returns:
        JSON-serializable structural summary.
    """
    return {
        "sources": [
            {
                "source_id": source.source_id,
                "file_name": source.file_name,
                "sheet_name": source.sheet_name,
                "row_count": source.row_count,
                "column_count": source.column_count,
                "headers": source.headers,
                "sample_rows": source.rows[:sample_rows],
            }
            for source in sources
        ],
        "consolidated": {
            "headers": result.headers,
            "primary_key": result.primary_key,
            "strategy": result.strategy.value,
            "record_count": len(result.records),
            "relationships": [rel.model_dump() for rel in result.analysis.relationships],
            "sample_records": result.records[:sample_rows],
        },
    }


def apply_enrichment(result: ConsolidatedResult, payload: EnrichmentPayload) -> ConsolidatedResult:
    """Overlay a validated enrichment payload on a deterministic result.

    Records (and with them headers) are replaced only when the payload holds
    a non-empty record array. Proposed headers come first, followed by any
    record keys they miss.

    Args:
        result: Deterministic consolidation result.
        payload: Validated enrichment payload.

    Returns:
        A new result; ``result`` itself is not modified.
    """
    update: dict[str, Any] = {}

    if payload.merged_data:
        records = payload.merged_data
        headers = list(dict.fromkeys(payload.consolidated_headers))
        headers.extend(column for column in collect_headers(records) if column not in headers)
        update["records"] = records
        update["headers"] = headers
    if payload.summary:
        update["summary"] = payload.summary
    if payload.insights:
        update["insights"] = payload.insights
    if payload.recommendations:
        update["recommendations"] = payload.recommendations

    records = update.get("records", result.records)
    headers = update.get("headers", result.headers)
    update["diagnostics"] = result.diagnostics.model_copy(
        update={
            "enriched": True,
            "record_count": len(records),
            "distinct_columns": len(headers),
        }
    )
    return result.model_copy(update=update)


class ConsolidationEnricher:
    """Asks an LLM to review and optionally improve a consolidation.

    Example:
        >>> enricher = ConsolidationEnricher(EnrichmentConfig.from_env())
        >>> result = consolidate(sources)
        >>> result = await enricher.enrich(sources, result)
        >>> result.diagnostics.enriched
        True

    Attributes:
        config: Enrichment settings.
    """

    def __init__(
        self,
        config: EnrichmentConfig | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the enricher.

        Args:
            config: Enrichment settings; defaults to ``EnrichmentConfig.from_env()``.
            client: Pre-built async OpenAI client.
        """
        self._chat = ChatCompleter(config, client)
        self.config = self._chat.config

    async def enrich(
        self,
        sources: Sequence[SourceTable],
        result: ConsolidatedResult,
    ) -> ConsolidatedResult:
        """Enrich a deterministic result, falling back to it on any failure.

        Args:
            sources: Source tables that were consolidated.
            result: Deterministic consolidation result.

        Returns:
            The enriched result, or ``result`` unchanged.
        """
        if not self._chat.available:
            logger.warning("OpenAI API key not configured, using deterministic result")
            return result

        structure = build_structure_summary(sources, result, self.config.sample_rows)
        prompt = ENRICHMENT_PROMPT.format(structure=json.dumps(structure, indent=2, default=str))

        try:
            content = await self._chat.complete(prompt, json_mode=True)
            payload = parse_enrichment_response(content)
            enriched = apply_enrichment(result, payload)
        except tenacity.RetryError:
            logger.warning("Enrichment retries exhausted, using deterministic result")
            return result
        except openai.OpenAIError:
            logger.warning("Enrichment request failed, using deterministic result", exc_info=True)
            return result
        except EnrichmentError as e:
            logger.warning("Enrichment response rejected, using deterministic result", error=str(e))
            return result
        except Exception:
            logger.warning(
                "Enrichment failed unexpectedly, using deterministic result", exc_info=True
            )
            return result

        logger.info(
            "Enrichment applied",
            records_replaced=bool(payload.merged_data),
            records=len(enriched.records),
            insights=len(enriched.insights),
        )
        return enriched
