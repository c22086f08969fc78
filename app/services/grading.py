"""Grading evaluator: scores submitted answers against the answer key.

Grading is pure. It never trusts correctness claimed by the client and
never raises for bad user input; an unanswered or malformed answer is just
a wrong one. The only hard failure is a question whose kind is unknown,
which means the stored quiz itself is corrupt.
"""

import logging
from typing import Callable, Dict, Iterable, List

from app.schemas.quiz import QuestionBase, QuestionKind, QuizDefinition
from app.schemas.quiz_response import AnswerValue, GradedAnswer, SubmittedAnswer

logger = logging.getLogger(__name__)


def _exact_match(question: QuestionBase, value: AnswerValue) -> bool:
    # Option ids and "True"/"False" are compared case-sensitively
    if not isinstance(value, str) or not value:
        return False
    return value == question.answer_key()


def _normalised_match(question: QuestionBase, value: AnswerValue) -> bool:
    # Only case and surrounding whitespace are forgiven
    if not isinstance(value, str):
        return False
    submitted = value.strip().lower()
    if not submitted:
        return False
    return submitted == question.answer_key().strip().lower()


def _never_correct(question: QuestionBase, value: AnswerValue) -> bool:
    return False


_COMPARATORS: Dict[QuestionKind, Callable[[QuestionBase, AnswerValue], bool]] = {
    QuestionKind.MULTIPLE_CHOICE: _exact_match,
    QuestionKind.TRUE_FALSE: _exact_match,
    QuestionKind.FILL_BLANK: _normalised_match,
    QuestionKind.ESSAY: _never_correct,  # left for manual grading
}


def grade(question: QuestionBase, submitted: SubmittedAnswer) -> GradedAnswer:
    """Grade one answer against its question.

    The caller pairs ``submitted`` with the question of the same id; this
    function does not check it.

    Raises:
        ValueError: if the question has no recognised ``kind``.
    """
    kind = getattr(question, "kind", None)
    try:
        comparator = _COMPARATORS[QuestionKind(kind)]
    except ValueError:
        raise ValueError(f"Question {question.id!r} has unknown kind {kind!r}")

    is_correct = comparator(question, submitted.answer)
    return GradedAnswer(
        question_id=question.id,
        user_answer=submitted.answer,
        is_correct=is_correct,
        points_earned=question.points if is_correct else 0,
        time_spent=submitted.time_spent,
    )


def grade_submission(
    quiz: QuizDefinition, answers: Iterable[SubmittedAnswer]
) -> List[GradedAnswer]:
    """Grade every answer that references a question of ``quiz``.

    Answers for unknown question ids are skipped, as are repeat answers to
    a question already graded in this submission. Output keeps the order
    the answers were submitted in.
    """
    questions = quiz.question_by_id()
    graded: List[GradedAnswer] = []
    seen = set()

    for answer in answers:
        question = questions.get(answer.question_id)
        if question is None:
            logger.debug("Quiz %s: ignoring answer to unknown question %r", quiz.id, answer.question_id)
            continue
        if answer.question_id in seen:
            logger.debug("Quiz %s: ignoring repeat answer to question %r", quiz.id, answer.question_id)
            continue
        seen.add(answer.question_id)
        graded.append(grade(question, answer))

    return graded
