"""Tests for result assembly and disclosure rules."""

import pytest

from app.schemas.quiz import ShowResults
from app.schemas.quiz_response import GradedAnswer, SubmittedAnswer
from app.services.grading import grade_submission
from app.services.results import assemble, percentage_of


def submit(quiz, pairs, completion_time=None):
    answers = [SubmittedAnswer(question_id=qid, answer=value) for qid, value in pairs]
    graded = grade_submission(quiz, answers)
    return graded, assemble(quiz, graded, completion_time)


class TestPercentage:
    @pytest.mark.parametrize(
        "score,total,expected",
        [(3, 3, 100), (2, 3, 67), (1, 3, 33), (0, 3, 0), (1, 8, 13), (5, 8, 63), (1, 200, 1)],
    )
    def test_rounds_half_up(self, score, total, expected):
        assert percentage_of(score, total) == expected

    def test_zero_total_is_zero(self):
        assert percentage_of(0, 0) == 0


class TestScoreSummary:
    def test_all_correct(self, sample_quiz):
        _, result = submit(sample_quiz, [("q1", "B"), ("q2", "paris")], completion_time=42)
        summary = result.summary
        assert summary.score == 3
        assert summary.total_points == 3
        assert summary.percentage == 100
        assert summary.passed is True
        assert summary.completion_time == 42

    def test_all_wrong(self, sample_quiz):
        _, result = submit(sample_quiz, [("q1", "A"), ("q2", "London")])
        assert result.summary.score == 0
        assert result.summary.percentage == 0
        assert result.summary.passed is False

    def test_partial_credit_passes(self, sample_quiz):
        _, result = submit(sample_quiz, [("q1", "B"), ("q2", "London")])
        assert result.summary.score == 2
        assert result.summary.percentage == 67
        assert result.summary.passed is True

    def test_score_is_sum_of_points_earned(self, sample_quiz):
        graded, result = submit(sample_quiz, [("q1", "A"), ("q2", "Paris")])
        assert result.summary.score == sum(g.points_earned for g in graded) == 1

    def test_passing_threshold_is_inclusive(self, quiz_factory, mc_question, fill_question):
        quiz = quiz_factory([mc_question, fill_question], passing_score=67)
        _, result = submit(quiz, [("q1", "B")])
        assert result.summary.percentage == 67
        assert result.summary.passed is True

    def test_just_below_threshold_fails(self, quiz_factory, mc_question, fill_question):
        quiz = quiz_factory([mc_question, fill_question], passing_score=68)
        _, result = submit(quiz, [("q1", "B")])
        assert result.summary.passed is False

    def test_zero_question_quiz(self, quiz_factory):
        quiz = quiz_factory([])
        _, result = submit(quiz, [("ghost", "B")])
        assert result.summary.score == 0
        assert result.summary.total_points == 0
        assert result.summary.percentage == 0
        assert result.summary.passed is False

    def test_zero_passing_score_passes_empty_quiz(self, quiz_factory):
        _, result = submit(quiz_factory([], passing_score=0), [])
        assert result.summary.passed is True

    def test_summary_never_carries_answer_keys(self, sample_quiz):
        _, result = submit(sample_quiz, [("q1", "B")])
        dumped = result.summary.model_dump(by_alias=True)
        assert set(dumped) == {"score", "totalPoints", "percentage", "passed", "completionTime"}


class TestBreakdown:
    def test_present_with_answer_keys(self, sample_quiz):
        _, result = submit(sample_quiz, [("q1", "B"), ("q2", "paris")])
        assert len(result.breakdown) == 2
        assert all(entry.is_correct for entry in result.breakdown)
        assert [entry.correct_answer for entry in result.breakdown] == ["B", "Paris"]

    @pytest.mark.parametrize("mode", [ShowResults.IMMEDIATELY, ShowResults.AFTER_SUBMIT])
    def test_present_when_released(self, quiz_factory, mc_question, mode):
        _, result = submit(quiz_factory([mc_question], show_results=mode), [("q1", "B")])
        assert result.breakdown is not None

    def test_absent_when_manual(self, quiz_factory, mc_question):
        _, result = submit(quiz_factory([mc_question], show_results=ShowResults.MANUAL), [("q1", "B")])
        assert result.breakdown is None
        assert result.summary.score == 2

    def test_correct_answer_hidden_when_disabled(self, quiz_factory, mc_question):
        quiz = quiz_factory([mc_question], show_correct_answers=False, show_explanations=False)
        _, result = submit(quiz, [("q1", "A")])
        entry = result.breakdown[0].model_dump(by_alias=True, exclude_unset=True)
        assert "correctAnswer" not in entry
        assert entry == {"questionId": "q1", "userAnswer": "A", "isCorrect": False, "pointsEarned": 0}

    def test_essay_correct_answer_is_null_but_present(self, quiz_factory, essay_question):
        _, result = submit(quiz_factory([essay_question]), [("q4", "My essay")])
        entry = result.breakdown[0].model_dump(by_alias=True, exclude_unset=True)
        assert "correctAnswer" in entry
        assert entry["correctAnswer"] is None

    def test_explanation_when_enabled_and_defined(self, sample_quiz):
        _, result = submit(sample_quiz, [("q1", "B"), ("q2", "Paris")])
        q1, q2 = [entry.model_dump(by_alias=True, exclude_unset=True) for entry in result.breakdown]
        assert q1["explanation"] == "Paris has been the capital since 987."
        assert "explanationLatex" in q1
        assert "explanation" not in q2

    def test_explanation_hidden_when_disabled(self, quiz_factory, mc_question):
        _, result = submit(quiz_factory([mc_question], show_explanations=False), [("q1", "B")])
        entry = result.breakdown[0].model_dump(by_alias=True, exclude_unset=True)
        assert "explanation" not in entry
        assert "explanationLatex" not in entry

    def test_empty_explanation_not_disclosed(self, quiz_factory, mc_question):
        question = mc_question.model_copy(update={"explanation": ""})
        _, result = submit(quiz_factory([question]), [("q1", "B")])
        assert "explanation" not in result.breakdown[0].model_dump(exclude_unset=True)

    def test_blank_explanation_not_disclosed(self, quiz_factory, mc_question):
        question = mc_question.model_copy(update={"explanation": "   "})
        _, result = submit(quiz_factory([question]), [("q1", "B")])
        entry = result.breakdown[0].model_dump(by_alias=True, exclude_unset=True)
        assert "explanation" not in entry
        assert "explanationLatex" not in entry

    def test_breakdown_uses_server_grading(self, sample_quiz):
        forged = GradedAnswer(question_id="q1", user_answer="A", is_correct=False, points_earned=0)
        result = assemble(sample_quiz, [forged])
        assert result.breakdown[0].is_correct is False
        assert result.summary.score == 0
