"""Configuration for the consolidation engine and the optional LLM layer.

``ConsolidationConfig`` holds the heuristic thresholds used by the
deterministic engine. ``EnrichmentConfig`` holds the OpenAI settings used by
the enrichment and report-assistant steps.
"""

import os
from dataclasses import dataclass

# Similarity thresholds (strictly greater than)
GROUPING_THRESHOLD = 0.6
RELATIONSHIP_THRESHOLD = 0.8

# Primary-key eligibility (strictly greater than)
KEY_UNIQUENESS_THRESHOLD = 0.7

DEFAULT_MODEL = "gpt-4o"


@dataclass(frozen=True)
class ConsolidationConfig:
    """Thresholds for schema matching, key detection and strategy choice.

    Attributes:
        grouping_threshold: Similarity above which two columns are grouped.
        relationship_threshold: Similarity above which two columns link two sources.
        key_uniqueness_threshold: Uniqueness above which a column may be the primary key.
        merge_ratio: Common columns per source above which the strategy is ``merge``.
        lookup_confidence: Relationship confidence above which the strategy is ``lookup``.
        union_min_common: Common columns above which the strategy is ``union``.
        composite_value_limit: Values used for a generic composite key.
    """

    grouping_threshold: float = GROUPING_THRESHOLD
    relationship_threshold: float = RELATIONSHIP_THRESHOLD
    key_uniqueness_threshold: float = KEY_UNIQUENESS_THRESHOLD
    merge_ratio: float = 0.5
    lookup_confidence: float = 0.7
    union_min_common: int = 2
    composite_value_limit: int = 3

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name in ("grouping_threshold", "relationship_threshold", "key_uniqueness_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                msg = f"{name} must be between 0 and 1"
                raise ValueError(msg)
        if self.merge_ratio < 0:
            msg = "merge_ratio must be non-negative"
            raise ValueError(msg)
        if self.union_min_common < 0:
            msg = "union_min_common must be non-negative"
            raise ValueError(msg)
        if self.composite_value_limit <= 0:
            msg = "composite_value_limit must be positive"
            raise ValueError(msg)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary representation of configuration.
        """
        return {
            "grouping_threshold": self.grouping_threshold,
            "relationship_threshold": self.relationship_threshold,
            "key_uniqueness_threshold": self.key_uniqueness_threshold,
            "merge_ratio": self.merge_ratio,
            "lookup_confidence": self.lookup_confidence,
            "union_min_common": self.union_min_common,
            "composite_value_limit": self.composite_value_limit,
        }


@dataclass
class EnrichmentConfig:
    """Settings for the OpenAI-backed enrichment and report assistant.

    Attributes:
        api_key: OpenAI API key; empty disables enrichment.
        model: Chat model name.
        sample_rows: Rows per source included in the structural summary.
        max_records: Records sent to the model for custom report transforms.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.
    """

    api_key: str = ""
    model: str = DEFAULT_MODEL
    sample_rows: int = 5
    max_records: int = 100
    temperature: float = 0.0
    max_tokens: int = 4000

    @property
    def enabled(self) -> bool:
        """Whether an API key is configured."""
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "EnrichmentConfig":
        """Build configuration from ``OPENAI_API_KEY`` and ``CONSOLIDATOR_MODEL``.

        Returns:
            Configuration populated from the environment.
        """
        return cls(
            api_key=os.getenv("OPENAI_API_KEY", ""),
            model=os.getenv("CONSOLIDATOR_MODEL", DEFAULT_MODEL),
        )
