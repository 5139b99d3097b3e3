"""Claude AI client for response and essay evaluation.

The generation service is untrusted: it returns free-form text that is expected
to hold a single JSON object. This client only moves text across the boundary;
parsing and repair happen in the scoring services.
"""

from functools import lru_cache
from typing import Optional, Protocol

import structlog
from anthropic import APIError, APITimeoutError, AsyncAnthropic

from prepwise.config.settings import settings

logger = structlog.get_logger()


class GenerationClient(Protocol):
    """Anything that can turn an evaluation prompt into raw model text."""

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        ...


class ClaudeClient:
    """Claude AI client for evaluation requests."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize Claude client with async support.

        SDK-level retries are disabled; a failed evaluation is retried by the
        caller re-submitting the whole request.
        """
        self.client = AsyncAnthropic(
            api_key=api_key or settings.ANTHROPIC_API_KEY,
            timeout=timeout or settings.GENERATION_TIMEOUT_SECONDS,
            max_retries=0,
        )
        self.model = model or settings.CLAUDE_MODEL
        self.max_tokens = max_tokens or settings.CLAUDE_MAX_TOKENS

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Request a JSON evaluation from Claude.

        Args:
            system_prompt: Evaluator instructions and output schema
            user_prompt: Question/essay and candidate signals

        Returns:
            Raw response text (may be wrapped in code fences)

        Raises:
            EvaluationGenerationError: On timeout, API failure or empty reply
        """
        logger.debug("Requesting evaluation from Claude", model=self.model)

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_prompt,
                messages=[
                    {
                        "role": "user",
                        "content": user_prompt,
                    }
                ],
            )
        except APITimeoutError as e:
            logger.error("Claude API timeout during evaluation", error=str(e))
            raise EvaluationGenerationError("Evaluation request timed out") from e
        except APIError as e:
            logger.error("Claude API error during evaluation", error=str(e))
            raise EvaluationGenerationError(f"Evaluation request failed: {str(e)}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

        if not text.strip():
            logger.error("Claude returned an empty evaluation response", stop_reason=response.stop_reason)
            raise EvaluationGenerationError("Generation service returned an empty response")

        return text


@lru_cache
def get_generation_client() -> ClaudeClient:
    """Get the shared Claude client, created on first use."""
    return ClaudeClient()


class EvaluationGenerationError(Exception):
    """Raised when an evaluation cannot be produced from the generation service.

    Covers network failures, timeouts, empty responses and payloads that are
    not a JSON object. Always safe to retry by re-submitting the request.
    """

    retryable = True
