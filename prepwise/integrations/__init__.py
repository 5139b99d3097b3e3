"""External service integrations."""

from .claude import ClaudeClient, EvaluationGenerationError, GenerationClient, get_generation_client

__all__ = ["ClaudeClient", "EvaluationGenerationError", "GenerationClient", "get_generation_client"]
