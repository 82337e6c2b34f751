"""Test suite for tabular-consolidator.

This package contains tests for all modules:
- test_similarity: Column-name similarity scoring
- test_schema_analyzer: Column frequency, similarity groups, relationships
- test_column_normalizer: Canonical column names and the column mapping
- test_value_normalizer: Role-driven cell value normalization
- test_primary_key: Primary-key detection
- test_entity_merger: Horizontal entity merging and conflict resolution
- test_consolidator: End-to-end orchestration
- test_enrichment: LLM enrichment, validation and report assistant
- test_loaders / test_exporters: Spreadsheet ingestion and encoding
"""
