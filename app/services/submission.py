"""Submission flow: load, gate, grade, assemble, persist.

Storage is reached only through the two repository protocols below, so
the flow can run against in-memory fakes.
"""

import logging
from typing import Protocol, Sequence
from uuid import UUID

from app.core.exceptions import RetakeNotAllowed
from app.schemas.quiz import QuizDefinition
from app.schemas.quiz_response import (
    GradedAnswer,
    QuizSubmission,
    Respondent,
    ScoreSummary,
    SubmissionResponse,
)
from app.services.grading import grade_submission
from app.services.results import assemble, results_released

logger = logging.getLogger(__name__)


class QuizRepository(Protocol):
    def get_quiz_by_id(self, quiz_id: UUID) -> QuizDefinition:
        """Full quiz with answer keys; raises QuizNotFound if absent or inactive."""
        ...


class SubmissionRepository(Protocol):
    def has_response(self, quiz_id: UUID, respondent_id: UUID) -> bool:
        ...

    def save_submission(
        self,
        quiz: QuizDefinition,
        summary: ScoreSummary,
        graded_answers: Sequence[GradedAnswer],
        respondent: Respondent,
    ) -> UUID:
        ...


def submit_quiz(
    quizzes: QuizRepository,
    submissions: SubmissionRepository,
    quiz_id: UUID,
    payload: QuizSubmission,
    respondent: Respondent,
) -> SubmissionResponse:
    """
    Grade and record one submission.

    Args:
        quizzes: Source of the authoritative (unredacted) quiz
        submissions: Where the graded result is stored
        quiz_id: Quiz being answered
        payload: Answers as sent by the client
        respondent: Identity details gathered by the HTTP layer

    Returns:
        The response body. ``results`` and ``detailedResults`` are only
        present when the quiz releases results on submission.

    Raises:
        QuizNotFound: unknown or inactive quiz
        RetakeNotAllowed: the identified user already answered a quiz that
            forbids retakes
    """
    quiz = quizzes.get_quiz_by_id(quiz_id)

    if not quiz.settings.allow_retake and respondent.user_id is not None:
        if submissions.has_response(quiz.id, respondent.user_id):
            raise RetakeNotAllowed()

    if payload.respondent_email:
        respondent = respondent.model_copy(update={"email": payload.respondent_email})

    graded = grade_submission(quiz, payload.answers)
    result = assemble(quiz, graded, payload.completion_time)
    response_id = submissions.save_submission(quiz, result.summary, graded, respondent)

    logger.info(
        "Quiz %s response %s: %d/%d points (%d%%)",
        quiz.id,
        response_id,
        result.summary.score,
        result.summary.total_points,
        result.summary.percentage,
    )

    body = {"response_id": response_id, "message": "Quiz submitted successfully"}
    if results_released(quiz.settings):
        body["results"] = result.summary
        body["detailed_results"] = result.breakdown
    return SubmissionResponse(**body)
