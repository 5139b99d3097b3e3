"""Evaluation of a completed practice session.

Turns the client's submission into evaluator inputs, runs response and essay
evaluation, and merges the results. Nothing is stored until the whole run has
succeeded, so a failed request can simply be re-submitted.
"""

from typing import List, Optional

import structlog

from prepwise.integrations.claude import GenerationClient, get_generation_client
from prepwise.middleware.error_handler import ValidationAPIError
from prepwise.schemas.interviews import (
    EssayPrompt,
    EvaluateRequest,
    InterviewEvaluation,
    SpeechAnalyticsSnapshot,
)
from prepwise.services.essay_evaluator import EssayEvaluationInput, evaluate_essays
from prepwise.services.evaluation_engine import compile_interview_evaluation, merge_essay_evaluations
from prepwise.services.response_evaluator import ResponseEvaluationInput

logger = structlog.get_logger()

NO_TRANSCRIPT = "[No transcript available]"


class EvaluationService:
    """Evaluates a session's recorded responses and essays."""

    def __init__(self, client: Optional[GenerationClient] = None):
        self.client = client or get_generation_client()

    async def evaluate(self, request: EvaluateRequest) -> InterviewEvaluation:
        """Evaluate a submitted session.

        Args:
            request: Responses, essays, plan and profile for the session

        Returns:
            Final InterviewEvaluation, essays merged in when present

        Raises:
            ValidationAPIError: If the plan has no questions or no response
                matches a plan question
            EvaluationGenerationError: If any evaluation fails
        """
        log = logger.bind(session_id=request.session_id, candidate_id=request.candidate_id)

        if not request.plan.questions:
            log.error("Invalid plan: no questions")
            raise ValidationAPIError(
                "Interview session plan is invalid: no questions found. Please generate a new interview plan.",
                field="plan.questions",
            )

        inputs = self.build_response_inputs(request)
        if not inputs:
            raise ValidationAPIError(
                "No valid responses found for evaluation. "
                "Please ensure all responses correspond to questions in the interview plan.",
                field="responses",
            )

        log.info("Evaluating interview responses", response_count=len(inputs))
        evaluation = await compile_interview_evaluation(inputs, self.client)

        essay_inputs = self.build_essay_inputs(request)
        if essay_inputs:
            log.info("Evaluating essays", essay_count=len(essay_inputs))
            essay_evaluations = await evaluate_essays(essay_inputs, self.client)
            merge_essay_evaluations(evaluation, essay_evaluations)

        log.info(
            "Session evaluation complete",
            overall_score=evaluation.overall_score,
            responses=len(evaluation.responses),
            essays=len(evaluation.essay_evaluations or []),
        )

        return evaluation

    def build_response_inputs(self, request: EvaluateRequest) -> List[ResponseEvaluationInput]:
        """Match response payloads to plan questions.

        Payloads without a question ID or referencing an unknown question are
        dropped. A missing speech snapshot becomes an empty placeholder.
        """
        questions = {question.id: question for question in request.plan.questions}
        inputs = []
        missing_questions = []

        for payload in request.responses:
            if not payload.question_id:
                logger.warning("Response payload missing questionId, skipping")
                continue

            question = questions.get(payload.question_id)
            if question is None:
                missing_questions.append(payload.question_id)
                continue

            speech = payload.speech or SpeechAnalyticsSnapshot(
                transcript=NO_TRANSCRIPT,
                filler_word_count=0,
                speaking_rate_wpm=0,
            )

            inputs.append(
                ResponseEvaluationInput(
                    session_id=request.session_id,
                    question=question,
                    profile=request.profile,
                    speech=speech,
                    non_verbal_signals=list(payload.non_verbal_signals),
                )
            )

        if missing_questions:
            logger.warning(
                "Some questions were not found in the plan",
                missing_questions=missing_questions,
                valid_responses=len(inputs),
            )

        return inputs

    def build_essay_inputs(self, request: EvaluateRequest) -> List[EssayEvaluationInput]:
        """Match essay payloads to the plan's essay prompts."""
        if not request.essays:
            return []

        prompts: List[EssayPrompt] = list(request.plan.essay_prompts)
        if not prompts and request.plan.essay_prompt:
            prompts = [request.plan.essay_prompt]
        prompts_by_id = {prompt.id: prompt for prompt in prompts}

        inputs = []
        for payload in request.essays:
            if not payload.essay_id or not payload.content:
                logger.warning("Essay payload missing essayId or content, skipping")
                continue

            essay_prompt = prompts_by_id.get(payload.essay_id)
            if essay_prompt is None:
                logger.warning("Essay prompt not found", essay_id=payload.essay_id)
                continue

            inputs.append(
                EssayEvaluationInput(
                    session_id=request.session_id,
                    essay_prompt=essay_prompt,
                    essay_content=payload.content,
                    profile=request.profile,
                )
            )

        return inputs
