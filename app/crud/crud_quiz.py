import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import QuizInactive, QuizNotFound, SecretCodeRequired
from app.db.models import Quiz, QuizResponse
from app.schemas.quiz import QuestionBase, QuizCreate, QuizDefinition, QuizSettings, QuizUpdate
from app.schemas.quiz_response import GradedAnswer, Respondent, ScoreSummary
from app.services.redaction import recompute_total_points

logger = logging.getLogger(__name__)


def quiz_to_definition(quiz: Quiz) -> QuizDefinition:
    """Validate a stored quiz back into its typed definition."""
    return QuizDefinition.model_validate(quiz)


def _store_questions(quiz: Quiz, questions: Sequence[QuestionBase]) -> None:
    quiz.questions = [question.model_dump(mode="json") for question in questions]
    quiz.total_points = recompute_total_points(quiz_to_definition(quiz)).total_points


def create_quiz(db: Session, owner_id: UUID, data: QuizCreate) -> Quiz:
    quiz = Quiz(
        id=uuid.uuid4(),
        title=data.title,
        description=data.description,
        created_by=owner_id,
        is_public=data.is_public,
        secret_code=data.secret_code,
        is_active=True,
        settings=data.settings.model_dump(mode="json"),
        total_points=0,
        response_count=0,
    )
    _store_questions(quiz, data.questions)
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    logger.info("Created quiz %s with %d questions", quiz.id, len(data.questions))
    return quiz


def get_quiz(db: Session, quiz_id: UUID) -> Optional[Quiz]:
    return db.query(Quiz).filter(Quiz.id == quiz_id).first()


def get_quiz_by_secret_code(db: Session, code: str) -> Optional[Quiz]:
    return db.query(Quiz).filter(Quiz.secret_code == code).first()


def get_active_quiz(db: Session, quiz_id: UUID) -> Quiz:
    """
    Fetch a quiz that can take submissions.

    Raises QuizNotFound if it does not exist and QuizInactive if its owner
    has switched it off.
    """
    quiz = get_quiz(db, quiz_id)
    if quiz is None:
        raise QuizNotFound()
    if not quiz.is_active:
        raise QuizInactive()
    return quiz


def get_viewable_quiz(
    db: Session, identifier: str, code: Optional[str] = None, viewer_id: Optional[UUID] = None
) -> Quiz:
    """
    Resolve a quiz for reading by its id, or by secret code when `code` is given.

    The owner may read their own quiz without the code. Raises QuizNotFound,
    QuizInactive or SecretCodeRequired.
    """
    quiz = None
    try:
        quiz = get_quiz(db, UUID(identifier))
    except ValueError:
        pass
    if quiz is None and code:
        quiz = get_quiz_by_secret_code(db, code)

    if quiz is None:
        raise QuizNotFound()
    if not quiz.is_active:
        raise QuizInactive()
    if viewer_id is not None and viewer_id == quiz.created_by:
        return quiz
    if quiz.secret_code and quiz.secret_code != code:
        raise SecretCodeRequired()
    return quiz


def list_public_quizzes(db: Session, skip: int = 0, limit: int = 10) -> Tuple[List[Quiz], int]:
    query = db.query(Quiz).filter(
        Quiz.is_public.is_(True),
        Quiz.is_active.is_(True),
        Quiz.secret_code.is_(None),
    )
    total = query.count()
    quizzes = query.order_by(Quiz.created_at.desc()).offset(skip).limit(limit).all()
    return quizzes, total


def list_user_quizzes(db: Session, user_id: UUID, skip: int = 0, limit: int = 10) -> Tuple[List[Quiz], int]:
    query = db.query(Quiz).filter(Quiz.created_by == user_id)
    total = query.count()
    quizzes = query.order_by(Quiz.created_at.desc()).offset(skip).limit(limit).all()
    return quizzes, total


def update_quiz(db: Session, quiz: Quiz, data: QuizUpdate) -> Quiz:
    changes = data.model_dump(exclude_unset=True, exclude={"questions", "settings"})
    for field, value in changes.items():
        if field == "secret_code" and value is not None and not value.strip():
            value = None
        setattr(quiz, field, value)

    if data.settings is not None:
        merged = {**quiz.settings, **data.settings.model_dump(exclude_unset=True, mode="json")}
        quiz.settings = QuizSettings.model_validate(merged).model_dump(mode="json")

    if data.questions is not None:
        _store_questions(quiz, data.questions)

    db.commit()
    db.refresh(quiz)
    logger.info("Updated quiz %s", quiz.id)
    return quiz


def delete_quiz(db: Session, quiz: Quiz) -> None:
    quiz_id = quiz.id
    db.query(QuizResponse).filter(QuizResponse.quiz_id == quiz_id).delete(synchronize_session=False)
    db.delete(quiz)
    db.commit()
    logger.info("Deleted quiz %s and its responses", quiz_id)


def has_response(db: Session, quiz_id: UUID, respondent_id: UUID) -> bool:
    return (
        db.query(QuizResponse.id)
        .filter(QuizResponse.quiz_id == quiz_id, QuizResponse.respondent_id == respondent_id)
        .first()
        is not None
    )


def create_quiz_response(
    db: Session,
    quiz_id: UUID,
    summary: ScoreSummary,
    graded_answers: Sequence[GradedAnswer],
    respondent: Respondent,
) -> QuizResponse:
    """
    Store a graded submission and bump the quiz's response counter.
    """
    response = QuizResponse(
        id=uuid.uuid4(),
        quiz_id=quiz_id,
        respondent_id=respondent.user_id,
        respondent_email=respondent.email,
        answers=[answer.model_dump(mode="json") for answer in graded_answers],
        score=summary.score,
        total_points=summary.total_points,
        percentage=summary.percentage,
        passed=summary.passed,
        completion_time=summary.completion_time,
        submitted_at=datetime.now(timezone.utc),
        is_complete=True,
        ip_address=respondent.ip_address,
        user_agent=respondent.user_agent,
    )
    db.add(response)
    db.query(Quiz).filter(Quiz.id == quiz_id).update(
        {Quiz.response_count: Quiz.response_count + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(response)
    return response


def list_quiz_responses(db: Session, quiz_id: UUID, skip: int = 0, limit: int = 10) -> Tuple[List[QuizResponse], int]:
    query = db.query(QuizResponse).filter(QuizResponse.quiz_id == quiz_id)
    total = query.count()
    responses = query.order_by(QuizResponse.created_at.desc()).offset(skip).limit(limit).all()
    return responses, total


def count_responses_for_owner(db: Session, owner_id: UUID) -> int:
    return (
        db.query(func.count(QuizResponse.id))
        .join(Quiz, QuizResponse.quiz_id == Quiz.id)
        .filter(Quiz.created_by == owner_id)
        .scalar()
    )


class SqlQuizRepository:
    """Quiz repository backed by the SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get_quiz_by_id(self, quiz_id: UUID) -> QuizDefinition:
        return quiz_to_definition(get_active_quiz(self.db, quiz_id))


class SqlSubmissionRepository:
    """Submission repository backed by the SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def has_response(self, quiz_id: UUID, respondent_id: UUID) -> bool:
        return has_response(self.db, quiz_id, respondent_id)

    def save_submission(
        self,
        quiz: QuizDefinition,
        summary: ScoreSummary,
        graded_answers: Sequence[GradedAnswer],
        respondent: Respondent,
    ) -> UUID:
        return create_quiz_response(self.db, quiz.id, summary, graded_answers, respondent).id
