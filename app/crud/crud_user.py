import uuid
from typing import Optional

from sqlalchemy.future import select
from sqlalchemy.orm import Session

from app.core.exceptions import EmailAlreadyRegistered, IncorrectPassword
from app.core.security import get_password_hash, verify_password
from app.db.models import User
from app.schemas.user import UserCreate, UserUpdate


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    result = db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


def get_user(db: Session, user_id: uuid.UUID) -> Optional[User]:
    result = db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


def create_user(db: Session, user: UserCreate, role: str = "user") -> User:
    if get_user_by_email(db, user.email) is not None:
        raise EmailAlreadyRegistered()
    db_user = User(
        id=uuid.uuid4(),
        name=user.name,
        email=user.email.lower(),
        password_hash=get_password_hash(user.password),
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def update_profile(db: Session, user: User, data: UserUpdate) -> User:
    if data.name is not None:
        user.name = data.name
    if data.email is not None and data.email.lower() != user.email:
        if get_user_by_email(db, data.email) is not None:
            raise EmailAlreadyRegistered("Email already taken")
        user.email = data.email.lower()
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise IncorrectPassword()
    user.password_hash = get_password_hash(new_password)
    db.commit()


def ensure_default_admin(db: Session, name: str, email: str, password: str) -> User:
    """Create the admin account if no user holds ``email`` yet."""
    existing = get_user_by_email(db, email)
    if existing is not None:
        return existing
    return create_user(db, UserCreate(name=name, email=email, password=password), role="admin")
