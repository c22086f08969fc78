"""Shared test fixtures and configuration for pytest."""

import os

# Must be set before the app modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import uuid
from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import models  # noqa: F401  registers the tables
from app.db.base import Base
from app.db.session import get_db
from app.main import app as fastapi_app
from app.schemas.quiz import (
    EssayQuestion,
    FillBlankQuestion,
    MultipleChoiceQuestion,
    QuestionOption,
    QuizDefinition,
    QuizSettings,
    ShowResults,
    TrueFalseQuestion,
)
from app.services.redaction import recompute_total_points


def make_quiz(questions, **settings) -> QuizDefinition:
    """Build a quiz definition with its total points already computed."""
    quiz = QuizDefinition(
        id=uuid.uuid4(),
        title="Geography",
        created_by=uuid.uuid4(),
        questions=questions,
        settings=QuizSettings(**settings),
    )
    return recompute_total_points(quiz)


@pytest.fixture
def mc_question() -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(
        id="q1",
        question="Which city is the capital of France?",
        options=[
            QuestionOption(id="A", text="London"),
            QuestionOption(id="B", text="Paris"),
            QuestionOption(id="C", text="Berlin"),
        ],
        correct_answer="B",
        points=2,
        explanation="Paris has been the capital since 987.",
    )


@pytest.fixture
def fill_question() -> FillBlankQuestion:
    return FillBlankQuestion(
        id="q2",
        question="The capital of France is ____.",
        correct_answer="Paris",
        points=1,
    )


@pytest.fixture
def tf_question() -> TrueFalseQuestion:
    return TrueFalseQuestion(
        id="q3",
        question="The Seine flows through Paris.",
        correct_answer="True",
        points=1,
    )


@pytest.fixture
def essay_question() -> EssayQuestion:
    return EssayQuestion(
        id="q4",
        question="Describe the history of Paris.",
        points=5,
        explanation="Look for Roman origins.",
    )


@pytest.fixture
def sample_quiz(mc_question, fill_question) -> QuizDefinition:
    """Two-question quiz: Q1 multiple choice (2 pts), Q2 fill-in (1 pt)."""
    return make_quiz(
        [mc_question, fill_question],
        passing_score=60,
        show_results=ShowResults.AFTER_SUBMIT,
        show_correct_answers=True,
    )


@pytest.fixture
def quiz_factory() -> Callable[..., QuizDefinition]:
    return make_quiz


# --- HTTP fixtures ---


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(engine) -> TestClient:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def register_user(client) -> Callable[..., dict]:
    """Register and log in a user; returns auth headers plus the profile."""

    def _register(name: str = "Ada", email: str = "ada@example.com", password: str = "secret123") -> dict:
        response = client.post("/users/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        login = client.post("/auth/login", data={"username": email, "password": password})
        assert login.status_code == 200, login.text
        token = login.json()["access_token"]
        return {
            "headers": {"Authorization": f"Bearer {token}"},
            "user": response.json(),
            "tokens": login.json(),
        }

    return _register


@pytest.fixture
def quiz_payload() -> dict:
    return {
        "title": "Capitals",
        "description": "European capitals",
        "questions": [
            {
                "id": "q1",
                "kind": "multiple-choice",
                "question": "Which city is the capital of France?",
                "options": [
                    {"id": "A", "text": "London"},
                    {"id": "B", "text": "Paris"},
                ],
                "correctAnswer": "B",
                "points": 2,
                "explanation": "Paris has been the capital since 987.",
            },
            {
                "id": "q2",
                "kind": "fill-blank",
                "question": "The capital of France is ____.",
                "correctAnswer": "Paris",
                "points": 1,
            },
        ],
        "settings": {
            "passingScore": 60,
            "showResults": "after_submit",
            "showCorrectAnswers": True,
            "showExplanations": True,
        },
    }
