"""Aggregation of per-response and per-essay evaluations into one report.

Rubric averages are always recomputed from the raw per-response scores, never
from previously averaged values, so every contribution carries equal weight.
"""

import asyncio
import math
from numbers import Real
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from prepwise.integrations.claude import GenerationClient, get_generation_client
from prepwise.schemas.interviews import EssayEvaluation, InterviewEvaluation
from prepwise.services.response_evaluator import ResponseEvaluationInput, evaluate_response
from prepwise.services.scoring import mean, round2

logger = structlog.get_logger()

# Essay rubric dimension -> interview rubric dimension
ESSAY_DIMENSION_MAP = {
    "Writing Quality": "Communication",
    "Clarity": "Communication",
    "Structure": "Clarity",
    "Depth": "Impact",
    "Impact": "Impact",
}


def _is_valid_score(score: Any) -> bool:
    return isinstance(score, Real) and not isinstance(score, bool) and math.isfinite(score)


def accumulate_scores(
    accumulator: Dict[str, List[float]],
    scores: Any,
    source: str,
    dimension_map: Optional[Mapping[str, str]] = None,
) -> None:
    """Append each valid score to the accumulator under its dimension.

    With ``dimension_map``, dimensions are renamed through it and unmapped
    dimensions are dropped. Malformed maps and non-finite scores are skipped.
    """
    if not isinstance(scores, Mapping):
        logger.warning("Evaluation missing scores, skipping", source=source)
        return

    for dimension, score in scores.items():
        if not _is_valid_score(score):
            logger.warning("Invalid score, skipping", source=source, dimension=dimension, score=str(score))
            continue

        if dimension_map is not None:
            mapped = dimension_map.get(dimension)
            if mapped is None:
                logger.warning("Unmapped essay dimension, dropping", source=source, dimension=dimension)
                continue
            dimension = mapped

        accumulator.setdefault(dimension, []).append(float(score))


def average_rubric(accumulator: Mapping[str, List[float]]) -> Dict[str, float]:
    """Per-dimension mean, rounded to 2 decimals."""
    return {dimension: round2(mean(values)) for dimension, values in accumulator.items() if values}


def overall_from_rubric(rubric_scores: Mapping[str, float]) -> float:
    """Mean of the rubric averages, or 0 when there are none."""
    if not rubric_scores:
        return 0.0
    return round2(mean(rubric_scores.values()))


def aggregate_rubric_scores(score_maps: Iterable[Any]) -> Dict[str, float]:
    """Average raw score maps into one rubric."""
    accumulator: Dict[str, List[float]] = {}
    for index, scores in enumerate(score_maps):
        accumulate_scores(accumulator, scores, source=f"response[{index}]")
    return average_rubric(accumulator)


async def compile_interview_evaluation(
    inputs: List[ResponseEvaluationInput],
    client: Optional[GenerationClient] = None,
) -> InterviewEvaluation:
    """Evaluate all responses concurrently and aggregate the rubric.

    Args:
        inputs: One entry per answered question, all referencing known questions
        client: Generation client (defaults to the shared Claude client)

    Returns:
        InterviewEvaluation with responses in input order (no essays yet)

    Raises:
        ValueError: If ``inputs`` is empty
        EvaluationGenerationError: If any single response evaluation fails
    """
    if not inputs:
        raise ValueError("No evaluation inputs provided")

    client = client or get_generation_client()

    logger.info("Compiling interview evaluation", response_count=len(inputs))

    # gather() returns results by argument position, not completion order
    responses = list(await asyncio.gather(*(evaluate_response(item, client) for item in inputs)))

    rubric_scores = aggregate_rubric_scores(response.scores for response in responses)
    overall_score = overall_from_rubric(rubric_scores)

    logger.info(
        "Interview evaluation compiled",
        overall_score=overall_score,
        dimensions=len(rubric_scores),
    )

    return InterviewEvaluation(
        overall_score=overall_score,
        rubric_scores=rubric_scores,
        responses=responses,
    )


def merge_essay_evaluations(
    evaluation: InterviewEvaluation,
    essay_evaluations: List[EssayEvaluation],
) -> InterviewEvaluation:
    """Fold essay scores into the interview rubric.

    Essay dimensions are renamed through ESSAY_DIMENSION_MAP and combined with
    the raw per-response scores. Merged dimensions overwrite the existing
    rubric; dimensions only present before the merge are kept. Mutates and
    returns ``evaluation``. An empty essay list leaves it untouched.
    """
    if not essay_evaluations:
        return evaluation

    accumulator: Dict[str, List[float]] = {}

    for response in evaluation.responses:
        accumulate_scores(accumulator, response.scores, source=f"question:{response.question_id}")

    for essay in essay_evaluations:
        accumulate_scores(
            accumulator,
            essay.scores,
            source=f"essay:{essay.essay_id}",
            dimension_map=ESSAY_DIMENSION_MAP,
        )

    combined_rubric = average_rubric(accumulator)
    combined_overall = overall_from_rubric(combined_rubric) if combined_rubric else evaluation.overall_score

    evaluation.overall_score = combined_overall
    evaluation.rubric_scores = {**evaluation.rubric_scores, **combined_rubric}
    evaluation.essay_evaluations = list(essay_evaluations)

    logger.info(
        "Merged essay evaluations",
        essay_count=len(essay_evaluations),
        overall_score=combined_overall,
    )

    return evaluation
