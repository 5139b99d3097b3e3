"""Defensive parsing and repair of generated rubric evaluations.

Model output is treated as untrusted: text is parsed permissively, then every
value is sanitized field by field. Only a payload that is not a JSON object at
all is fatal; everything else is repaired with a logged warning.
"""

import json
import math
import re
from numbers import Real
from typing import Any, Iterable, Mapping

import structlog

from prepwise.config.settings import settings
from prepwise.integrations.claude import EvaluationGenerationError

logger = structlog.get_logger()

SCORE_MIN = 0.0
SCORE_MAX = 10.0

RESPONSE_DIMENSIONS = ["Leadership", "Communication", "Clarity", "Impact", "Fit"]
ESSAY_DIMENSIONS = ["Writing Quality", "Clarity", "Structure", "Depth", "Impact"]

_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"^[+-]?\d+")
_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```\s*$")


def round2(value: float) -> float:
    """Round to 2 decimal places."""
    return round(value, 2)


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for no values."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def _parse_numeric_prefix(text: str) -> float | None:
    """Read the leading number of a string ("7.5/10" -> 7.5)."""
    match = _LEADING_FLOAT.match(text)
    if match:
        value = float(match.group())
        if math.isfinite(value):
            return value

    match = _LEADING_INT.match(text)
    if match:
        try:
            return float(int(match.group()))
        except (OverflowError, ValueError):
            # Too many digits for int() or float()
            return None

    return None


def coerce_score(raw: Any, dimension: str, fallback: float | None = None) -> float:
    """Convert an untrusted value into a rubric score in [0, 10].

    Never raises. Missing, non-numeric or non-finite values become
    ``fallback``; out-of-range numbers are clamped. Results are rounded to
    2 decimal places.
    """
    if fallback is None:
        fallback = settings.DEFAULT_RUBRIC_SCORE

    if raw is None:
        logger.warning("Rubric score missing, using fallback", dimension=dimension, fallback=fallback)
        return fallback

    if isinstance(raw, str):
        value = _parse_numeric_prefix(raw.strip())
        if value is None:
            logger.warning(
                "Rubric score is not numeric, using fallback",
                dimension=dimension,
                raw=raw[:50],
                fallback=fallback,
            )
            return fallback
    elif isinstance(raw, Real) and not isinstance(raw, bool):
        try:
            value = float(raw)
        except OverflowError:
            # Integers past the float range still have a sign
            logger.warning("Rubric score overflows float, clamping", dimension=dimension)
            value = SCORE_MAX if raw > 0 else SCORE_MIN
        if not math.isfinite(value):
            logger.warning("Rubric score is not finite, using fallback", dimension=dimension, raw=str(raw))
            return fallback
    else:
        logger.warning(
            "Rubric score has unsupported type, using fallback",
            dimension=dimension,
            raw_type=type(raw).__name__,
            fallback=fallback,
        )
        return fallback

    if value < SCORE_MIN:
        logger.warning("Rubric score below minimum, clamping", dimension=dimension, raw=value)
        value = SCORE_MIN
    elif value > SCORE_MAX:
        logger.warning("Rubric score above maximum, clamping", dimension=dimension, raw=value)
        value = SCORE_MAX

    return round2(value)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json / ``` fence if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def _extract_json(text: str) -> str:
    """Extract a JSON object from a response that may contain other text."""
    start = text.find("{")
    end = text.rfind("}") + 1

    if start != -1 and end > start:
        return text[start:end]

    raise ValueError("No JSON object found in response")


def parse_generation_text(text: str | None) -> dict[str, Any]:
    """Parse raw generation output into a JSON object.

    Raises:
        EvaluationGenerationError: If the text is empty or holds no JSON object
    """
    if not text or not text.strip():
        raise EvaluationGenerationError("Generation service returned an empty response")

    cleaned = strip_code_fences(text)

    try:
        data = json.loads(cleaned)
    except ValueError:
        # Prose around the object ("Here is the evaluation: {...}")
        try:
            data = json.loads(_extract_json(cleaned))
        except ValueError as e:
            logger.error("Failed to parse evaluation JSON", error=str(e), content=cleaned[:500])
            raise EvaluationGenerationError(f"Failed to parse evaluation JSON: {str(e)}") from e

    if not isinstance(data, dict):
        logger.error("Evaluation payload is not an object", payload_type=type(data).__name__)
        raise EvaluationGenerationError("Evaluation payload is not a JSON object")

    return data


def _string_list(value: Any, field: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Expected a list, using empty list", field=field, raw_type=type(value).__name__)
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def _narrative(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def validate_rubric_payload(
    raw: Any,
    required_dimensions: list[str],
    narrative_fields: Mapping[str, str],
    optional_fields: Iterable[str] = (),
) -> dict[str, Any]:
    """Sanitize a parsed evaluation payload.

    Args:
        raw: Parsed JSON value from the generator
        required_dimensions: Dimensions that must be present in ``scores``
        narrative_fields: Payload key -> placeholder text substituted when
            the field is missing
        optional_fields: Narrative keys passed through only when usable

    Returns:
        Dict with ``overall_commentary``, ``strengths``, ``improvements``,
        ``scores`` and one entry per narrative/optional field

    Raises:
        EvaluationGenerationError: If ``raw`` is not an object
    """
    if not isinstance(raw, dict):
        raise EvaluationGenerationError("Evaluation payload is not a JSON object")

    raw_scores = raw.get("rubric_scores")
    if not isinstance(raw_scores, dict):
        logger.warning(
            "rubric_scores missing from evaluation, using fallback scores",
            raw_type=type(raw_scores).__name__,
        )
        raw_scores = {}

    scores: dict[str, float] = {}
    for dimension, value in raw_scores.items():
        scores[str(dimension)] = coerce_score(value, str(dimension))

    for dimension in required_dimensions:
        if dimension not in scores:
            logger.warning("Missing required rubric dimension, using fallback", dimension=dimension)
            scores[dimension] = settings.DEFAULT_RUBRIC_SCORE

    result: dict[str, Any] = {
        "overall_commentary": _narrative(raw.get("overall_commentary")) or "",
        "strengths": _string_list(raw.get("strengths"), "strengths"),
        "improvements": _string_list(raw.get("improvements"), "improvements"),
        "scores": scores,
    }

    for field, placeholder in narrative_fields.items():
        text = _narrative(raw.get(field))
        if text is None:
            logger.warning("Missing narrative field, using placeholder", field=field)
            text = placeholder
        result[field] = text

    for field in optional_fields:
        result[field] = _narrative(raw.get(field))

    return result
