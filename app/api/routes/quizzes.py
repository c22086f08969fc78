import logging
import math
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user
from app.core.exceptions import QuizInactive, QuizNotFound, RetakeNotAllowed, SecretCodeRequired
from app.crud import crud_quiz
from app.crud.crud_quiz import SqlQuizRepository, SqlSubmissionRepository, quiz_to_definition
from app.db.models import Quiz, User
from app.db.session import get_db
from app.schemas.quiz import (
    PublicQuizList,
    QuizCreate,
    QuizDefinition,
    QuizList,
    QuizSettings,
    QuizSummary,
    QuizUpdate,
)
from app.schemas.quiz_response import (
    QuizResponsesPage,
    QuizResponsesQuiz,
    QuizSubmission,
    Respondent,
    StoredQuizResponse,
    SubmissionResponse,
)
from app.services.redaction import public_view
from app.services.submission import submit_quiz

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quizzes", tags=["Quizzes"])


def _pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)


def _owned_quiz(db: Session, quiz_id: UUID, user: User) -> Quiz:
    quiz = crud_quiz.get_quiz(db, quiz_id)
    if quiz is None or quiz.created_by != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    return quiz


@router.get("/public", response_model=PublicQuizList)
def get_public_quizzes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    quizzes, total = crud_quiz.list_public_quizzes(db, skip=(page - 1) * limit, limit=limit)
    summaries = [
        QuizSummary(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            created_by=quiz.created_by,
            author_name=quiz.owner.name if quiz.owner else None,
            response_count=quiz.response_count,
            total_points=quiz.total_points,
            time_limit=QuizSettings.model_validate(quiz.settings).time_limit,
            created_at=quiz.created_at,
        )
        for quiz in quizzes
    ]
    return PublicQuizList(quizzes=summaries, total=total, page=page, pages=_pages(total, limit))


@router.get("/my-quizzes", response_model=QuizList)
def get_my_quizzes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quizzes, total = crud_quiz.list_user_quizzes(db, current_user.id, skip=(page - 1) * limit, limit=limit)
    return QuizList(
        quizzes=[quiz_to_definition(quiz) for quiz in quizzes],
        total=total,
        page=page,
        pages=_pages(total, limit),
    )


@router.post("", response_model=QuizDefinition, status_code=status.HTTP_201_CREATED)
def create_quiz(
    quiz_in: QuizCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz = crud_quiz.create_quiz(db, current_user.id, quiz_in)
    return quiz_to_definition(quiz)


@router.get("/{identifier}", response_model=None)
def get_quiz(
    identifier: str,
    code: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
) -> dict:
    """
    Fetch a quiz by id, or by secret code when `code` is given.

    The owner gets the full definition; everyone else gets the redacted
    public view with no answer keys.
    """
    viewer_id = current_user.id if current_user else None
    try:
        quiz = crud_quiz.get_viewable_quiz(db, identifier, code=code, viewer_id=viewer_id)
    except QuizInactive as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    except QuizNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    except SecretCodeRequired as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=exc.message)

    definition = quiz_to_definition(quiz)
    if viewer_id is not None and viewer_id == quiz.created_by:
        return definition.model_dump(mode="json", by_alias=True)
    return public_view(definition).model_dump(mode="json", by_alias=True)


@router.post(
    "/{quiz_id}/submit",
    response_model=SubmissionResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def submit_quiz_response(
    quiz_id: UUID,
    submission: QuizSubmission,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    respondent = Respondent(
        user_id=current_user.id if current_user else None,
        email=current_user.email if current_user else None,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    try:
        return submit_quiz(
            SqlQuizRepository(db),
            SqlSubmissionRepository(db),
            quiz_id,
            submission,
            respondent,
        )
    except QuizInactive as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    except QuizNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    except RetakeNotAllowed as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)


@router.get("/{quiz_id}/responses", response_model=QuizResponsesPage)
def get_quiz_responses(
    quiz_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz = _owned_quiz(db, quiz_id, current_user)
    responses, total = crud_quiz.list_quiz_responses(db, quiz.id, skip=(page - 1) * limit, limit=limit)
    definition = quiz_to_definition(quiz)
    return QuizResponsesPage(
        responses=[StoredQuizResponse.model_validate(response) for response in responses],
        total=total,
        page=page,
        pages=_pages(total, limit),
        quiz=QuizResponsesQuiz(
            title=definition.title,
            description=definition.description,
            questions=definition.questions,
            total_points=definition.total_points,
            settings=definition.settings,
        ),
    )


@router.put("/{quiz_id}", response_model=QuizDefinition)
def update_quiz(
    quiz_id: UUID,
    quiz_in: QuizUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz = _owned_quiz(db, quiz_id, current_user)
    return quiz_to_definition(crud_quiz.update_quiz(db, quiz, quiz_in))


@router.delete("/{quiz_id}")
def delete_quiz(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz = crud_quiz.get_quiz(db, quiz_id)
    if quiz is None or (quiz.created_by != current_user.id and not current_user.is_admin):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    crud_quiz.delete_quiz(db, quiz)
    return {"message": "Quiz deleted successfully"}
