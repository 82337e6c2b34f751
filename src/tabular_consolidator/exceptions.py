"""Custom exceptions for the tabular consolidator.

Provides a hierarchy of exceptions for different error conditions:
- ConsolidationError: Base exception for all consolidator errors
- InvalidSourceError: A source table is structurally unusable
- DuplicateSourceError: Two sources share the same source_id
- IngestionError: A file could not be read as a workbook or CSV
- EnrichmentError: An LLM response could not be used
- EnrichmentConfigError: Enrichment requested without an API key
"""


class ConsolidationError(Exception):
    """Base exception for consolidator errors."""


class InvalidSourceError(ConsolidationError):
    """A source table has the wrong shape.

    Raised fail-fast by ``consolidate`` when a source is not a table of
    string-keyed row mappings.

    Attributes:
        source_id: Identifier (or position) of the offending source.
    """

    def __init__(self, source_id: str, message: str) -> None:
        """Initialize InvalidSourceError.

        Args:
            source_id: Identifier (or position) of the offending source.
            message: Description of what is wrong with it.
        """
        self.source_id = source_id
        super().__init__(f"Invalid source {source_id!r}: {message}")


class DuplicateSourceError(ConsolidationError):
    """Two sources passed to one consolidation share a source_id."""

    def __init__(self, source_id: str) -> None:
        """Initialize DuplicateSourceError.

        Args:
            source_id: The repeated identifier.
        """
        self.source_id = source_id
        super().__init__(f"Duplicate source_id {source_id!r}; source ids must be unique")


class IngestionError(ConsolidationError):
    """Error while reading a spreadsheet or CSV file.

    Attributes:
        path: The file that failed to load.
    """

    def __init__(self, path: str, message: str) -> None:
        """Initialize IngestionError.

        Args:
            path: The file that failed to load.
            message: Description of what went wrong.
        """
        self.path = path
        super().__init__(f"Failed to load {path}: {message}")


class EnrichmentError(ConsolidationError):
    """An LLM response could not be parsed or failed validation."""


class EnrichmentConfigError(ConsolidationError):
    """OpenAI configuration environment variables not set.

    Raised when an LLM feature is requested but OPENAI_API_KEY is missing.
    """

    def __init__(self) -> None:
        """Initialize EnrichmentConfigError."""
        super().__init__(
            "OpenAI configuration missing. Set the OPENAI_API_KEY environment variable."
        )
