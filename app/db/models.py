import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.types import Text

from app.db.base import Base


def utcnow():
    """Function to return current UTC time with timezone info"""
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    quizzes = relationship("Quiz", back_populates="owner")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Quiz(Base):
    __tablename__ = "quizzes"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    is_public = Column(Boolean, default=True, nullable=False)
    secret_code = Column(String(100), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    # Question bank and settings are stored as documents and validated
    # through app.schemas.quiz on the way out.
    questions = Column(JSON, nullable=False, default=list)
    settings = Column(JSON, nullable=False, default=dict)
    total_points = Column(Integer, nullable=False, default=0)
    response_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="quizzes")
    responses = relationship(
        "QuizResponse",
        back_populates="quiz",
        cascade="all, delete-orphan",
    )


class QuizResponse(Base):
    __tablename__ = "quiz_responses"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    quiz_id = Column(Uuid, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    respondent_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    respondent_email = Column(String(150), nullable=True)
    answers = Column(JSON, nullable=False, default=list)
    score = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)
    percentage = Column(Integer, nullable=False, default=0)
    passed = Column(Boolean, nullable=False, default=False)
    completion_time = Column(Integer, nullable=True)  # seconds
    started_at = Column(DateTime(timezone=True), default=utcnow)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    is_complete = Column(Boolean, nullable=False, default=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    quiz = relationship("Quiz", back_populates="responses")
    respondent = relationship("User")
