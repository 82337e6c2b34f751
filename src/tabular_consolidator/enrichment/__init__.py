"""Optional OpenAI-backed layer over the deterministic engine.

This package provides:
- ConsolidationEnricher: reviews a consolidation, falls back on any failure
- ReportAssistant: answers questions about a report, builds custom views
- Validation that keeps source-tracking fields out of LLM-produced records
"""

from tabular_consolidator.enrichment.assistant import ReportAssistant
from tabular_consolidator.enrichment.client import ChatCompleter
from tabular_consolidator.enrichment.enricher import (
    ConsolidationEnricher,
    apply_enrichment,
    build_structure_summary,
)
from tabular_consolidator.enrichment.validator import (
    EnrichmentPayload,
    is_source_tracking_key,
    parse_enrichment_response,
    parse_record_array,
    strip_code_fences,
    strip_source_tracking,
)

__all__ = [
    # Enrichment
    "ConsolidationEnricher",
    "apply_enrichment",
    "build_structure_summary",
    # Report assistant
    "ReportAssistant",
    "ChatCompleter",
    # Validation
    "EnrichmentPayload",
    "is_source_tracking_key",
    "parse_enrichment_response",
    "parse_record_array",
    "strip_code_fences",
    "strip_source_tracking",
]
