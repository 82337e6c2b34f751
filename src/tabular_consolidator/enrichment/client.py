"""Thin async chat-completion wrapper shared by the enrichment components."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from tabular_consolidator.config import EnrichmentConfig
from tabular_consolidator.enrichment.prompts import SYSTEM_PROMPT
from tabular_consolidator.exceptions import EnrichmentConfigError, EnrichmentError
from tabular_consolidator.utils.retry import openai_retry

if TYPE_CHECKING:
    from openai import AsyncOpenAI

logger = structlog.get_logger(__name__)


class ChatCompleter:
    """Sends single-turn prompts to an OpenAI chat model.

    The client is created lazily from the configured API key unless one is
    injected (tests pass an ``AsyncMock``).

    Attributes:
        config: Model and sampling settings.
    """

    def __init__(
        self,
        config: EnrichmentConfig | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the completer.

        Args:
            config: Enrichment settings; defaults to ``EnrichmentConfig.from_env()``.
            client: Pre-built async OpenAI client.
        """
        self.config = config or EnrichmentConfig.from_env()
        self._client = client

    @property
    def available(self) -> bool:
        """Whether a client exists or can be created."""
        return self._client is not None or self.config.enabled

    @property
    def client(self) -> AsyncOpenAI:
        """The async OpenAI client.

        Raises:
            EnrichmentConfigError: If no client was injected and no API key is set.
        """
        if self._client is None:
            if not self.config.enabled:
                raise EnrichmentConfigError
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.config.api_key)
        return self._client

    @openai_retry
    async def complete(self, prompt: str, json_mode: bool = False) -> str:
        """Run one chat completion.

        Args:
            prompt: User prompt.
            json_mode: Request a JSON object response.

        Returns:
            The response text (empty if the model returned none).

        Raises:
            EnrichmentError: If the response carries no choices.
        """
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            **kwargs,
        )

        if not response.choices:
            msg = "Chat completion returned no choices"
            raise EnrichmentError(msg)

        content = response.choices[0].message.content or ""
        logger.debug("Chat completion received", model=self.config.model, chars=len(content))
        return content
