"""Tests for the submission flow against in-memory repositories."""

import uuid

import pytest

from app.core.exceptions import QuizInactive, QuizNotFound, RetakeNotAllowed
from app.schemas.quiz import ShowResults
from app.schemas.quiz_response import QuizSubmission, Respondent
from app.services.submission import submit_quiz


class FakeQuizRepository:
    def __init__(self, *quizzes, inactive=()):
        self.quizzes = {quiz.id: quiz for quiz in quizzes}
        self.inactive = set(inactive)

    def get_quiz_by_id(self, quiz_id):
        if quiz_id not in self.quizzes:
            raise QuizNotFound()
        if quiz_id in self.inactive:
            raise QuizInactive()
        return self.quizzes[quiz_id]


class FakeSubmissionRepository:
    def __init__(self):
        self.saved = []

    def has_response(self, quiz_id, respondent_id):
        return any(s["quiz_id"] == quiz_id and s["respondent"].user_id == respondent_id for s in self.saved)

    def save_submission(self, quiz, summary, graded_answers, respondent):
        response_id = uuid.uuid4()
        self.saved.append(
            {
                "id": response_id,
                "quiz_id": quiz.id,
                "summary": summary,
                "graded": list(graded_answers),
                "respondent": respondent,
            }
        )
        return response_id


def submission(*pairs, completion_time=None, email=None) -> QuizSubmission:
    return QuizSubmission(
        answers=[{"questionId": qid, "answer": value} for qid, value in pairs],
        completion_time=completion_time,
        respondent_email=email,
    )


@pytest.fixture
def submissions() -> FakeSubmissionRepository:
    return FakeSubmissionRepository()


class TestSubmitQuiz:
    def test_released_results(self, sample_quiz, submissions):
        response = submit_quiz(
            FakeQuizRepository(sample_quiz),
            submissions,
            sample_quiz.id,
            submission(("q1", "B"), ("q2", "paris"), completion_time=30),
            Respondent(),
        )
        body = response.model_dump(mode="json", by_alias=True, exclude_unset=True)

        assert body["message"] == "Quiz submitted successfully"
        assert body["responseId"] == str(submissions.saved[0]["id"])
        assert body["results"] == {
            "score": 3,
            "totalPoints": 3,
            "percentage": 100,
            "passed": True,
            "completionTime": 30,
        }
        assert [entry["correctAnswer"] for entry in body["detailedResults"]] == ["B", "Paris"]

    def test_persists_summary_and_graded_answers(self, sample_quiz, submissions):
        submit_quiz(
            FakeQuizRepository(sample_quiz),
            submissions,
            sample_quiz.id,
            submission(("q1", "B"), ("q2", "London")),
            Respondent(),
        )
        saved = submissions.saved[0]
        assert saved["summary"].score == 2
        assert saved["summary"].percentage == 67
        assert [g.is_correct for g in saved["graded"]] == [True, False]

    def test_manual_release_withholds_everything(self, quiz_factory, mc_question, submissions):
        quiz = quiz_factory([mc_question], show_results=ShowResults.MANUAL)
        response = submit_quiz(
            FakeQuizRepository(quiz), submissions, quiz.id, submission(("q1", "B")), Respondent()
        )
        body = response.model_dump(by_alias=True, exclude_unset=True)
        assert set(body) == {"responseId", "message"}
        # still stored for the owner
        assert submissions.saved[0]["summary"].score == 2

    def test_unknown_quiz(self, sample_quiz, submissions):
        with pytest.raises(QuizNotFound):
            submit_quiz(FakeQuizRepository(), submissions, sample_quiz.id, submission(), Respondent())
        assert submissions.saved == []

    def test_inactive_quiz(self, sample_quiz, submissions):
        repo = FakeQuizRepository(sample_quiz, inactive=[sample_quiz.id])
        with pytest.raises(QuizInactive):
            submit_quiz(repo, submissions, sample_quiz.id, submission(), Respondent())

    def test_retake_blocked_for_known_user(self, quiz_factory, mc_question, submissions):
        quiz = quiz_factory([mc_question], allow_retake=False)
        quizzes = FakeQuizRepository(quiz)
        respondent = Respondent(user_id=uuid.uuid4())

        submit_quiz(quizzes, submissions, quiz.id, submission(("q1", "A")), respondent)
        with pytest.raises(RetakeNotAllowed):
            submit_quiz(quizzes, submissions, quiz.id, submission(("q1", "B")), respondent)
        assert len(submissions.saved) == 1

    def test_anonymous_retakes_not_gated(self, quiz_factory, mc_question, submissions):
        quiz = quiz_factory([mc_question], allow_retake=False)
        quizzes = FakeQuizRepository(quiz)
        for _ in range(2):
            submit_quiz(quizzes, submissions, quiz.id, submission(("q1", "B")), Respondent())
        assert len(submissions.saved) == 2

    def test_payload_email_overrides_account_email(self, sample_quiz, submissions):
        submit_quiz(
            FakeQuizRepository(sample_quiz),
            submissions,
            sample_quiz.id,
            submission(email="guest@example.com"),
            Respondent(email="owner@example.com"),
        )
        assert submissions.saved[0]["respondent"].email == "guest@example.com"

    def test_empty_submission_scores_zero(self, sample_quiz, submissions):
        response = submit_quiz(
            FakeQuizRepository(sample_quiz), submissions, sample_quiz.id, submission(), Respondent()
        )
        assert response.results.score == 0
        assert response.results.passed is False
        assert response.detailed_results == []
