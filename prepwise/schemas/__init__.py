"""Pydantic schemas for the PrepWise evaluation API."""

from .base import CamelModel, FrozenCamelModel, ErrorDetail, ErrorResponse
from .interviews import (
    CandidateProfile,
    EssayEvaluation,
    EssayPayload,
    EssayPrompt,
    EvaluateRequest,
    InterviewEvaluation,
    InterviewQuestion,
    InterviewSessionPlan,
    NonVerbalSignal,
    ResponseEvaluation,
    ResponsePayload,
    ResumeEducationEntry,
    ResumeExperienceEntry,
    ResumeLeadershipEntry,
    SpeechAnalyticsSnapshot,
)

__all__ = [
    "CamelModel",
    "FrozenCamelModel",
    "ErrorDetail",
    "ErrorResponse",
    "CandidateProfile",
    "EssayEvaluation",
    "EssayPayload",
    "EssayPrompt",
    "EvaluateRequest",
    "InterviewEvaluation",
    "InterviewQuestion",
    "InterviewSessionPlan",
    "NonVerbalSignal",
    "ResponseEvaluation",
    "ResponsePayload",
    "ResumeEducationEntry",
    "ResumeExperienceEntry",
    "ResumeLeadershipEntry",
    "SpeechAnalyticsSnapshot",
]
