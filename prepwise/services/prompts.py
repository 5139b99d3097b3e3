"""System prompt templates shipped with the package."""

from functools import lru_cache
from pathlib import Path

import structlog

logger = structlog.get_logger()

PROMPTS_DIR = Path(__file__).parent.parent / "config" / "prompts"


@lru_cache
def load_prompt(prompt_type: str) -> str:
    """Load a system prompt by name (e.g. ``response_evaluation``).

    Raises:
        FileNotFoundError: If no template exists for the type
    """
    prompt_file = PROMPTS_DIR / f"{prompt_type}.md"
    logger.debug("Loading prompt from file", prompt_type=prompt_type, path=str(prompt_file))
    return prompt_file.read_text(encoding="utf-8")
