from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.deps import get_current_admin
from app.db.models import Quiz, QuizResponse, User
from app.db.session import get_db
from app.schemas.user import AdminDashboard

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/dashboard", response_model=AdminDashboard)
def get_dashboard(db: Session = Depends(get_db), _admin: User = Depends(get_current_admin)):
    return AdminDashboard(
        total_users=db.query(func.count(User.id)).scalar(),
        total_admins=db.query(func.count(User.id)).filter(User.role == "admin").scalar(),
        total_quizzes=db.query(func.count(Quiz.id)).scalar(),
        active_quizzes=db.query(func.count(Quiz.id)).filter(Quiz.is_active.is_(True)).scalar(),
        total_responses=db.query(func.count(QuizResponse.id)).scalar(),
    )
