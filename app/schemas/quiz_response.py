from typing import Any, List, Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.core.base_config import BaseConfig, UtcDatetime
from app.schemas.quiz import Question, QuizSettings

# Any JSON value; anything the question kind cannot read grades as wrong
AnswerValue = Any


class SubmittedAnswer(BaseConfig):
    question_id: str
    answer: AnswerValue = None
    time_spent: Optional[float] = Field(None, ge=0, description="Seconds spent on this question")


class QuizSubmission(BaseConfig):
    answers: List[SubmittedAnswer] = Field(default_factory=list)
    completion_time: Optional[int] = Field(None, ge=0, description="Total seconds taken")
    respondent_email: Optional[EmailStr] = None


class GradedAnswer(BaseConfig):
    question_id: str
    user_answer: AnswerValue = None
    is_correct: bool
    points_earned: int = Field(..., ge=0)
    time_spent: Optional[float] = None


class ScoreSummary(BaseConfig):
    score: int
    total_points: int
    percentage: int
    passed: bool
    completion_time: Optional[int] = None


class BreakdownEntry(BaseConfig):
    question_id: str
    user_answer: AnswerValue = None
    is_correct: bool
    points_earned: int
    # Only set when the visibility policy allows it
    correct_answer: Optional[str] = None
    explanation: Optional[str] = None
    explanation_latex: Optional[str] = None


class AssembledResult(BaseConfig):
    summary: ScoreSummary
    breakdown: Optional[List[BreakdownEntry]] = None


class SubmissionResponse(BaseConfig):
    response_id: UUID
    message: str
    results: Optional[ScoreSummary] = None
    detailed_results: Optional[List[BreakdownEntry]] = None


class StoredQuizResponse(BaseConfig):
    id: UUID
    quiz_id: UUID
    respondent_id: Optional[UUID] = None
    respondent_email: Optional[str] = None
    answers: List[GradedAnswer]
    score: int
    total_points: int
    percentage: int
    passed: bool
    completion_time: Optional[int] = None
    submitted_at: Optional[UtcDatetime] = None
    is_complete: bool


class QuizResponsesQuiz(BaseConfig):
    title: str
    description: Optional[str] = None
    questions: List[Question]
    total_points: int
    settings: QuizSettings


class QuizResponsesPage(BaseConfig):
    responses: List[StoredQuizResponse]
    total: int
    page: int
    pages: int
    quiz: QuizResponsesQuiz


class Respondent(BaseConfig):
    """Who submitted, as far as the serving layer knows."""

    user_id: Optional[UUID] = None
    email: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
