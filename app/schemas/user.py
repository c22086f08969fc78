from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.core.base_config import BaseConfig, UtcDatetime


class UserCreate(BaseConfig):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserResponse(BaseConfig):
    id: UUID
    name: str
    email: EmailStr
    role: str
    created_at: UtcDatetime


class UserStatsResponse(BaseConfig):
    total_quizzes: int
    total_responses: int
    quizzes_taken: int
    best_percentage: Optional[int] = None


class UserUpdate(BaseConfig):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None


class PasswordChange(BaseConfig):
    current_password: str
    new_password: str = Field(..., min_length=6)


class AdminDashboard(BaseConfig):
    total_users: int
    total_admins: int
    total_quizzes: int
    active_quizzes: int
    total_responses: int
