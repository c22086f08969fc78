"""Result assembler: turns graded answers into a score and a disclosure."""

import math
from fractions import Fraction
from typing import List, Optional, Sequence

from app.schemas.quiz import QuizDefinition, QuizSettings, ShowResults
from app.schemas.quiz_response import AssembledResult, BreakdownEntry, GradedAnswer, ScoreSummary

# Results for these modes are released to the submitter straight away
RELEASED_MODES = (ShowResults.IMMEDIATELY, ShowResults.AFTER_SUBMIT)


def percentage_of(score: int, total_points: int) -> int:
    """Whole-number percentage, rounding halves up. 0 for an empty total."""
    if total_points <= 0:
        return 0
    return math.floor(Fraction(score * 100, total_points) + Fraction(1, 2))


def summarise(
    quiz: QuizDefinition,
    graded_answers: Sequence[GradedAnswer],
    completion_time: Optional[int] = None,
) -> ScoreSummary:
    score = sum(answer.points_earned for answer in graded_answers)
    percentage = percentage_of(score, quiz.total_points)
    return ScoreSummary(
        score=score,
        total_points=quiz.total_points,
        percentage=percentage,
        passed=percentage >= quiz.settings.passing_score,
        completion_time=completion_time,
    )


def results_released(settings: QuizSettings) -> bool:
    return settings.show_results in RELEASED_MODES


def build_breakdown(
    quiz: QuizDefinition, graded_answers: Sequence[GradedAnswer]
) -> List[BreakdownEntry]:
    """Per-question disclosure, filtered through the quiz's visibility policy.

    Only fields the policy allows are *set* on each entry, so serialising
    with ``exclude_unset`` leaves the rest out entirely.
    """
    settings = quiz.settings
    questions = quiz.question_by_id()
    entries = []

    for answer in graded_answers:
        fields = {
            "question_id": answer.question_id,
            "user_answer": answer.user_answer,
            "is_correct": answer.is_correct,
            "points_earned": answer.points_earned,
        }
        question = questions.get(answer.question_id)
        if question is not None:
            if settings.show_correct_answers:
                fields["correct_answer"] = question.answer_key()
            if settings.show_explanations and question.explanation and question.explanation.strip():
                fields["explanation"] = question.explanation
                fields["explanation_latex"] = question.explanation_latex
        entries.append(BreakdownEntry(**fields))

    return entries


def assemble(
    quiz: QuizDefinition,
    graded_answers: Sequence[GradedAnswer],
    completion_time: Optional[int] = None,
) -> AssembledResult:
    """Score a graded submission and decide how much of it to disclose.

    The summary is always computed. The breakdown is None when the quiz
    holds results back for manual release.
    """
    summary = summarise(quiz, graded_answers, completion_time)
    if not results_released(quiz.settings):
        return AssembledResult(summary=summary)
    return AssembledResult(summary=summary, breakdown=build_breakdown(quiz, graded_answers))
