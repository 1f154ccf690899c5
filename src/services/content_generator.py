"""
LiteLLM-backed content generator for AI reminders.

Exactly one completion call per ``generate``: no retries, no model
fallbacks. Any failure surfaces as ``GenerationFailure`` and the engine
records the occurrence as ``skipped_error``.
"""

import asyncio
import logging
from typing import Optional

import litellm

from ..domain.errors import GenerationFailure

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_MAX_OUTPUT_TOKENS = 500
DEFAULT_TIMEOUT_SECONDS = 15.0


class LiteLLMContentGenerator:
    """Generates draft text through ``litellm.completion``."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.timeout_seconds = timeout_seconds

    async def generate(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            raise GenerationFailure("Prompt is empty")
        if not self.api_key:
            raise GenerationFailure("No API key configured for content generation")

        logger.info(
            "Calling LLM API with model: %s (prompt length %d)", self.model, len(prompt)
        )
        try:
            response = await asyncio.to_thread(
                litellm.completion,
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_output_tokens,
                timeout=self.timeout_seconds,
                api_key=self.api_key,
            )
        except Exception as e:
            raise GenerationFailure(f"Completion call failed: {e}") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise GenerationFailure("Malformed completion response") from e

        if not text or not text.strip():
            raise GenerationFailure("Model returned no text")

        return text.strip()
