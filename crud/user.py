from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
import logging

from models.user import UserDB

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user(db: Session, user_id: str) -> Optional[UserDB]:
    return db.query(UserDB).filter(UserDB.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[UserDB]:
    return db.query(UserDB).filter(UserDB.email == normalize_email(email)).first()


def create_user(db: Session, username: str, email: str, password_hash: str) -> Optional[UserDB]:
    """Создать пользователя; None если email уже занят"""
    if get_user_by_email(db, email):
        return None

    db_user = UserDB(username=username, email=normalize_email(email), password_hash=password_hash)
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # Параллельная регистрация с тем же email
        db.rollback()
        logger.info("Concurrent registration for %s rejected by unique constraint", email)
        return None
    db.refresh(db_user)
    return db_user
