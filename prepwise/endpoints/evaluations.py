"""Interview evaluation endpoints."""

import structlog
from fastapi import APIRouter, Depends

from prepwise.integrations.claude import GenerationClient, get_generation_client
from prepwise.schemas.base import ErrorResponse
from prepwise.schemas.interviews import EvaluateRequest, InterviewEvaluation
from prepwise.services.evaluation_service import EvaluationService

logger = structlog.get_logger()
router = APIRouter()


def get_evaluation_service(
    client: GenerationClient = Depends(get_generation_client),
) -> EvaluationService:
    """Build the evaluation service around the shared generation client."""
    return EvaluationService(client)


@router.post(
    "/evaluate",
    response_model=InterviewEvaluation,
    responses={
        400: {"model": ErrorResponse, "description": "Nothing in the request can be evaluated"},
        422: {"model": ErrorResponse, "description": "Malformed request body"},
        502: {"model": ErrorResponse, "description": "Evaluation failed; safe to re-submit"},
    },
)
async def evaluate_interview(
    data: EvaluateRequest,
    service: EvaluationService = Depends(get_evaluation_service),
):
    """Evaluate recorded responses (and optional essays) for a session.

    Responses whose question is not in the plan are ignored. If any
    evaluation fails the whole request fails and can be re-submitted.
    """
    logger.info(
        "Evaluation requested",
        session_id=data.session_id,
        candidate_id=data.candidate_id,
        responses=len(data.responses),
        essays=len(data.essays),
    )

    return await service.evaluate(data)
