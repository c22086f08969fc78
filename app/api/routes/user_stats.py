from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.crud import crud_quiz
from app.db.models import Quiz, QuizResponse, User
from app.db.session import get_db
from app.schemas.user import UserStatsResponse

router = APIRouter(prefix="/user_stats", tags=["User Stats"])


@router.get("/my_stats", response_model=UserStatsResponse)
def get_user_stats(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    total_quizzes = db.query(func.count(Quiz.id)).filter(Quiz.created_by == current_user.id).scalar()
    total_responses = crud_quiz.count_responses_for_owner(db, current_user.id)

    # Quizzes this user has answered themselves
    quizzes_taken, best_percentage = (
        db.query(func.count(func.distinct(QuizResponse.quiz_id)), func.max(QuizResponse.percentage))
        .filter(QuizResponse.respondent_id == current_user.id)
        .one()
    )

    return UserStatsResponse(
        total_quizzes=total_quizzes,
        total_responses=total_responses,
        quizzes_taken=quizzes_taken,
        best_percentage=best_percentage,
    )
