"""Pydantic schemas for interview plans, candidate signals and evaluations.

Rubric scores are open string-keyed maps: response and essay evaluations use
different dimension sets and extra dimensions returned by the generator are
kept.
"""

from typing import Literal, Optional

from pydantic import Field

from .base import CamelModel, FrozenCamelModel

QuestionCategory = Literal["behavioral", "situational", "school-specific", "essay"]
Sentiment = Literal["positive", "neutral", "negative"]


# Candidate profile (produced by resume parsing, consumed read-only here)
class ResumeEducationEntry(CamelModel):
    """One education entry from the parsed resume."""

    institution: str
    degree: str
    field_of_study: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    achievements: list[str] = []


class ResumeExperienceEntry(CamelModel):
    """One employment entry from the parsed resume."""

    company: str
    title: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    responsibilities: list[str] = []
    achievements: list[str] = []
    leadership_highlights: list[str] = []


class ResumeLeadershipEntry(CamelModel):
    """A leadership role outside of regular employment."""

    organization: str
    role: str
    impact: str
    metrics: list[str] = []


class CandidateProfile(CamelModel):
    """Structured candidate background."""

    full_name: Optional[str] = None
    current_role: Optional[str] = None
    total_experience_years: Optional[float] = None
    keywords: list[str] = []
    summary_bullets: list[str] = []
    education: list[ResumeEducationEntry] = []
    experience: list[ResumeExperienceEntry] = []
    leadership: list[ResumeLeadershipEntry] = []
    extracurriculars: list[str] = []
    achievements: list[str] = []


# Interview plan
class InterviewQuestion(FrozenCamelModel):
    """A generated interview question."""

    id: str
    category: QuestionCategory
    prompt: str
    follow_ups: list[str] = []
    rubric_focus: list[str] = []
    preparation_seconds: int = 30
    response_seconds: int = 120


class EssayPrompt(FrozenCamelModel):
    """A generated written-response prompt."""

    id: str
    prompt: str
    target_word_count: int = 300


class InterviewSessionPlan(CamelModel):
    """Ordered questions and essay prompts for one practice session."""

    session_id: str
    candidate_id: str
    questions: list[InterviewQuestion] = []
    essay_prompt: Optional[EssayPrompt] = None  # Legacy single-prompt plans
    essay_prompts: list[EssayPrompt] = []


# Candidate signals
class SpeechAnalyticsSnapshot(FrozenCamelModel):
    """Speech analytics captured for one recorded response."""

    transcript: str
    filler_word_count: int = Field(0, ge=0)
    speaking_rate_wpm: float = Field(0.0, ge=0)
    average_pitch_hz: Optional[float] = None
    sentiment: Optional[Sentiment] = None
    confidence: Optional[float] = Field(None, ge=0, le=1)  # ASR confidence


class NonVerbalSignal(FrozenCamelModel):
    """A heuristic non-verbal cue (eye contact, posture, ...)."""

    label: str
    score: float = Field(ge=0, le=10)
    notes: Optional[str] = None


# Evaluation results
class ResponseEvaluation(FrozenCamelModel):
    """Scored analysis of one spoken answer."""

    question_id: str
    transcript: str
    overall_commentary: str = ""
    tone_analysis: str
    communication_clarity: str
    confidence_analysis: str
    non_verbal_analysis: Optional[str] = None
    strengths: list[str] = []
    improvements: list[str] = []
    scores: dict[str, float] = {}


class EssayEvaluation(FrozenCamelModel):
    """Scored analysis of one written essay."""

    essay_id: str
    prompt: str
    content: str
    word_count: int
    overall_commentary: str = ""
    writing_clarity: str
    structure_analysis: str
    depth_analysis: str
    strengths: list[str] = []
    improvements: list[str] = []
    scores: dict[str, float] = {}


class InterviewEvaluation(CamelModel):
    """Aggregate report across all responses and, once merged, essays."""

    overall_score: float
    rubric_scores: dict[str, float] = {}
    responses: list[ResponseEvaluation] = []
    essay_evaluations: Optional[list[EssayEvaluation]] = None


# Request payloads
class ResponsePayload(CamelModel):
    """One recorded answer as submitted by the client."""

    question_id: Optional[str] = None
    speech: Optional[SpeechAnalyticsSnapshot] = None
    non_verbal_signals: list[NonVerbalSignal] = []


class EssayPayload(CamelModel):
    """One written essay as submitted by the client."""

    essay_id: Optional[str] = None
    content: Optional[str] = None


class EvaluateRequest(CamelModel):
    """Request to evaluate a completed practice session."""

    session_id: str = Field(min_length=1)
    candidate_id: str = Field(min_length=1)
    responses: list[ResponsePayload] = Field(min_length=1)
    essays: list[EssayPayload] = []
    plan: InterviewSessionPlan
    profile: CandidateProfile
