"""Evaluation of written essay responses."""

import asyncio
from dataclasses import dataclass
from typing import List, Optional

import structlog

from prepwise.config.settings import settings
from prepwise.integrations.claude import GenerationClient, get_generation_client
from prepwise.schemas.interviews import CandidateProfile, EssayEvaluation, EssayPrompt
from prepwise.services.prompts import load_prompt
from prepwise.services.scoring import ESSAY_DIMENSIONS, parse_generation_text, validate_rubric_payload

logger = structlog.get_logger()

ESSAY_NARRATIVE_FIELDS = {
    "writing_clarity": "Writing clarity analysis not available for this essay.",
    "structure_analysis": "Structure analysis not available for this essay.",
    "depth_analysis": "Depth analysis not available for this essay.",
}


@dataclass(frozen=True)
class EssayEvaluationInput:
    """Everything needed to evaluate one essay."""

    session_id: str
    essay_prompt: EssayPrompt
    essay_content: str
    profile: CandidateProfile


def count_words(content: str) -> int:
    """Count whitespace-separated words."""
    return len(content.split())


def word_count_status(word_count: int, target: int) -> str:
    """Describe how the essay length compares to the prompt's target."""
    minimum = int(target * 0.8)
    if word_count < minimum:
        return f"Warning: Essay is below minimum word count ({minimum} words)"
    if word_count > settings.ESSAY_MAX_WORDS:
        return f"Warning: Essay exceeds maximum word count ({settings.ESSAY_MAX_WORDS} words)"
    return "Word count is within acceptable range"


def profile_to_essay_context(profile: CandidateProfile) -> str:
    """Summarize the candidate background for essay evaluation."""
    highlights = []

    if profile.full_name:
        highlights.append(f"Name: {profile.full_name}")
    if profile.current_role:
        highlights.append(f"Current Role: {profile.current_role}")
    if profile.total_experience_years is not None:
        highlights.append(f"Experience: {profile.total_experience_years:g} years")
    if profile.summary_bullets:
        highlights.append(f"Summary: {'; '.join(profile.summary_bullets)}")
    if profile.keywords:
        highlights.append(f"Key Strengths: {', '.join(profile.keywords)}")

    return "\n".join(highlights)


def build_essay_prompt(evaluation_input: EssayEvaluationInput, word_count: int) -> str:
    """Build the user prompt for one essay evaluation."""
    target = evaluation_input.essay_prompt.target_word_count

    sections = [
        "=== ESSAY PROMPT ===",
        evaluation_input.essay_prompt.prompt,
        f"Target Word Count: {target} words",
        "\n=== CANDIDATE ESSAY ===",
        evaluation_input.essay_content,
        "\n=== WORD COUNT ===",
        f"Word Count: {word_count} words",
        f"Target: {target} words",
        word_count_status(word_count, target),
        "\n=== CANDIDATE CONTEXT ===",
        profile_to_essay_context(evaluation_input.profile) or "No background context",
        "\n=== EVALUATION REQUEST ===",
        "Evaluate this essay and return the JSON object described in your instructions, "
        f"with numeric rubric_scores for {', '.join(ESSAY_DIMENSIONS)}.",
    ]
    return "\n".join(sections)


async def evaluate_essay(
    evaluation_input: EssayEvaluationInput,
    client: Optional[GenerationClient] = None,
) -> EssayEvaluation:
    """Evaluate one essay.

    The word count is computed from the content, never taken from the model.

    Raises:
        EvaluationGenerationError: If no usable evaluation could be generated
    """
    client = client or get_generation_client()
    essay_id = evaluation_input.essay_prompt.id
    log = logger.bind(session_id=evaluation_input.session_id, essay_id=essay_id)

    word_count = count_words(evaluation_input.essay_content)
    log.info("Evaluating essay", word_count=word_count)

    raw_text = await client.generate(
        load_prompt("essay_evaluation"),
        build_essay_prompt(evaluation_input, word_count),
    )
    payload = validate_rubric_payload(
        parse_generation_text(raw_text),
        ESSAY_DIMENSIONS,
        ESSAY_NARRATIVE_FIELDS,
    )

    evaluation = EssayEvaluation(
        essay_id=essay_id,
        prompt=evaluation_input.essay_prompt.prompt,
        content=evaluation_input.essay_content,
        word_count=word_count,
        overall_commentary=payload["overall_commentary"],
        writing_clarity=payload["writing_clarity"],
        structure_analysis=payload["structure_analysis"],
        depth_analysis=payload["depth_analysis"],
        strengths=payload["strengths"],
        improvements=payload["improvements"],
        scores=payload["scores"],
    )

    log.info("Essay evaluation complete", scores=evaluation.scores)

    return evaluation


async def evaluate_essays(
    inputs: List[EssayEvaluationInput],
    client: Optional[GenerationClient] = None,
) -> List[EssayEvaluation]:
    """Evaluate essays concurrently, returning results in input order.

    An empty input list returns ``[]`` without contacting the generator.
    The first failure propagates.
    """
    if not inputs:
        return []

    client = client or get_generation_client()
    return list(await asyncio.gather(*(evaluate_essay(item, client) for item in inputs)))
