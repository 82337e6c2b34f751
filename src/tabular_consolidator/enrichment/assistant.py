"""LLM report assistant: questions about a consolidated report, custom views.

Unlike the enricher, the assistant has no deterministic fallback, so its
failures propagate to the caller.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

from tabular_consolidator.config import EnrichmentConfig
from tabular_consolidator.enrichment.client import ChatCompleter
from tabular_consolidator.enrichment.prompts import QUESTION_PROMPT, TRANSFORM_PROMPT
from tabular_consolidator.enrichment.validator import parse_record_array
from tabular_consolidator.models import ConsolidatedResult

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = structlog.get_logger(__name__)

QUESTION_SAMPLE_SIZE = 10


class ReportAssistant:
    """Answers questions about a consolidated report and reshapes its rows.

    Attributes:
        config: Enrichment settings.
    """

    def __init__(
        self,
        config: EnrichmentConfig | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the assistant.

        Args:
            config: Enrichment settings; defaults to ``EnrichmentConfig.from_env()``.
            client: Pre-built async OpenAI client.
        """
        self._chat = ChatCompleter(config, client)
        self.config = self._chat.config

    async def answer_question(self, result: ConsolidatedResult, question: str) -> str:
        """Answer a natural-language question about a consolidated report.

        Args:
            result: The consolidated report.
            question: The user's question.

        Returns:
            The model's answer.

        Raises:
            ValueError: If the question is blank.
            EnrichmentConfigError: If no API key is configured.
        """
        if not question.strip():
            msg = "question must not be empty"
            raise ValueError(msg)

        prompt = QUESTION_PROMPT.format(
            summary=result.summary,
            insights="\n".join(result.insights),
            sample_size=QUESTION_SAMPLE_SIZE,
            records=json.dumps(result.records[:QUESTION_SAMPLE_SIZE], indent=2, default=str),
            question=question.strip(),
        )
        answer = (await self._chat.complete(prompt)).strip()
        logger.info("Question answered", question_chars=len(question), answer_chars=len(answer))
        return answer

    async def transform_records(
        self,
        result: ConsolidatedResult,
        instructions: str,
    ) -> list[dict[str, Any]]:
        """Build a custom set of rows from a report, following user instructions.

        Args:
            result: The consolidated report.
            instructions: What the custom report should contain.

        Returns:
            Rows for export, scrubbed of source-tracking fields.

        Raises:
            ValueError: If the instructions are blank.
            EnrichmentError: If the response is not an array of rows.
            EnrichmentConfigError: If no API key is configured.
        """
        if not instructions.strip():
            msg = "instructions must not be empty"
            raise ValueError(msg)

        records = result.records[: self.config.max_records]
        prompt = TRANSFORM_PROMPT.format(
            records=json.dumps(records, indent=2, default=str),
            instructions=instructions.strip(),
        )
        content = await self._chat.complete(prompt, json_mode=True)
        rows = parse_record_array(content)
        logger.info("Custom report rows generated", input_records=len(records), rows=len(rows))
        return rows
