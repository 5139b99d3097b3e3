"""Evaluation of a single recorded interview response."""

from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from prepwise.config.settings import settings
from prepwise.integrations.claude import GenerationClient, get_generation_client
from prepwise.schemas.interviews import (
    CandidateProfile,
    InterviewQuestion,
    NonVerbalSignal,
    ResponseEvaluation,
    SpeechAnalyticsSnapshot,
)
from prepwise.services.prompts import load_prompt
from prepwise.services.scoring import RESPONSE_DIMENSIONS, parse_generation_text, validate_rubric_payload

logger = structlog.get_logger()

RESPONSE_NARRATIVE_FIELDS = {
    "tone_analysis": "Tone analysis not available for this response.",
    "communication_clarity": "Communication clarity analysis not available for this response.",
    "confidence_analysis": "Confidence analysis not available for this response.",
}
NON_VERBAL_PLACEHOLDER = "Non-verbal analysis not available for this response."


@dataclass(frozen=True)
class ResponseEvaluationInput:
    """Everything needed to evaluate one answer."""

    session_id: str
    question: InterviewQuestion
    profile: CandidateProfile
    speech: SpeechAnalyticsSnapshot
    non_verbal_signals: List[NonVerbalSignal] = field(default_factory=list)


def summarize_non_verbal(signals: List[NonVerbalSignal]) -> Optional[str]:
    """Render non-verbal signals as one line each ("Eye contact: 7/10 (notes)")."""
    if not signals:
        return None
    lines = []
    for signal in signals:
        line = f"{signal.label}: {signal.score:g}/10"
        if signal.notes:
            line += f" ({signal.notes})"
        lines.append(line)
    return "\n".join(lines)


def build_response_prompt(evaluation_input: ResponseEvaluationInput) -> str:
    """Build the user prompt for one response evaluation."""
    question = evaluation_input.question
    speech = evaluation_input.speech

    sections = [
        "=== INTERVIEW QUESTION ===",
        f"Category: {question.category}",
        f"Question: {question.prompt}",
    ]
    if question.rubric_focus:
        sections.append(f"Focus Areas: {', '.join(question.rubric_focus)}")

    sections.append("\n=== CANDIDATE RESPONSE ===")
    sections.append(f"Transcript:\n{speech.transcript or '[No transcript available]'}")

    sections.append("\n=== SPEECH ANALYTICS ===")
    sections.append(f"Speaking Rate: {speech.speaking_rate_wpm or 'N/A'} words per minute")
    sections.append(f"Filler Words: {speech.filler_word_count}")
    if speech.average_pitch_hz:
        sections.append(f"Average Pitch: {speech.average_pitch_hz} Hz")
    if speech.sentiment:
        sections.append(f"Sentiment: {speech.sentiment}")
    if speech.confidence:
        sections.append(f"Speech Recognition Confidence: {speech.confidence * 100:.1f}%")

    sections.append("\n=== NON-VERBAL ANALYSIS ===")
    sections.append(summarize_non_verbal(evaluation_input.non_verbal_signals) or "No non-verbal data available")

    sections.append("\n=== CANDIDATE CONTEXT ===")
    bullets = evaluation_input.profile.summary_bullets[: settings.PROFILE_HIGHLIGHT_LIMIT]
    if bullets:
        sections.append("Background Highlights:\n" + "\n".join(bullets))
    else:
        sections.append("No background context")

    sections.append("\n=== EVALUATION REQUEST ===")
    sections.append(
        "Evaluate this response and return the JSON object described in your instructions, "
        f"with numeric rubric_scores for {', '.join(RESPONSE_DIMENSIONS)}."
    )

    return "\n".join(sections)


async def evaluate_response(
    evaluation_input: ResponseEvaluationInput,
    client: Optional[GenerationClient] = None,
) -> ResponseEvaluation:
    """Evaluate one recorded answer.

    Args:
        evaluation_input: Question, candidate signals and profile
        client: Generation client (defaults to the shared Claude client)

    Returns:
        ResponseEvaluation with every required dimension scored

    Raises:
        EvaluationGenerationError: If no usable evaluation could be generated
    """
    client = client or get_generation_client()
    log = logger.bind(session_id=evaluation_input.session_id, question_id=evaluation_input.question.id)

    log.info("Evaluating interview response", category=evaluation_input.question.category)

    raw_text = await client.generate(load_prompt("response_evaluation"), build_response_prompt(evaluation_input))
    payload = validate_rubric_payload(
        parse_generation_text(raw_text),
        RESPONSE_DIMENSIONS,
        RESPONSE_NARRATIVE_FIELDS,
        optional_fields=("non_verbal_analysis",),
    )

    non_verbal_analysis = payload["non_verbal_analysis"]
    if non_verbal_analysis is None and evaluation_input.non_verbal_signals:
        log.warning("Missing non_verbal_analysis despite non-verbal signals")
        non_verbal_analysis = NON_VERBAL_PLACEHOLDER

    evaluation = ResponseEvaluation(
        question_id=evaluation_input.question.id,
        transcript=evaluation_input.speech.transcript,
        overall_commentary=payload["overall_commentary"],
        tone_analysis=payload["tone_analysis"],
        communication_clarity=payload["communication_clarity"],
        confidence_analysis=payload["confidence_analysis"],
        non_verbal_analysis=non_verbal_analysis,
        strengths=payload["strengths"],
        improvements=payload["improvements"],
        scores=payload["scores"],
    )

    log.info("Response evaluation complete", scores=evaluation.scores)

    return evaluation
