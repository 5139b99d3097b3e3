"""Evaluation services."""

from .essay_evaluator import EssayEvaluationInput, evaluate_essay, evaluate_essays
from .evaluation_engine import compile_interview_evaluation, merge_essay_evaluations
from .evaluation_service import EvaluationService
from .response_evaluator import ResponseEvaluationInput, evaluate_response
from .scoring import coerce_score, validate_rubric_payload

__all__ = [
    "EssayEvaluationInput",
    "EvaluationService",
    "ResponseEvaluationInput",
    "coerce_score",
    "compile_interview_evaluation",
    "evaluate_essay",
    "evaluate_essays",
    "evaluate_response",
    "merge_essay_evaluations",
    "validate_rubric_payload",
]
