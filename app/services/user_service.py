"""User service"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidInput, NotFound
from app.core.utils import is_valid_id
from app.models.user import User

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    if not email:
        return None
    return db.query(User).filter(User.email == email.strip().lower()).first()


def resolve_user_reference(db: Session, user_id) -> User:
    """Valide une référence utilisateur: format puis existence."""
    if not is_valid_id(user_id):
        raise InvalidInput("Invalid user id")
    user = get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def create_user(db: Session, username: str, email: str, password: str) -> User:
    username = (username or "").strip()
    email = (email or "").strip().lower()
    if not username or not email or not password:
        raise InvalidInput("Username, email and password are required")

    if db.query(User).filter(User.email == email).first():
        raise InvalidInput("Email already in use")
    if db.query(User).filter(User.username == username).first():
        raise InvalidInput("Username already in use")

    user = User(username=username, email=email)
    user.set_password(password)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User registered: {user.id}")
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not user.verify_password(password):
        return None
    return user
