"""
Аутентификация: регистрация, вход и проверка bearer-токенов.

Пароли хэшируются bcrypt (соль и cost factor внутри хэша).
Токены: JWT (HS256) с полями ``sub`` (id пользователя), ``iat`` и ``exp``;
на сервере они не хранятся, валидность определяется подписью и сроком.
"""

import logging
import re
import time
from datetime import timedelta
from functools import lru_cache
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

import crud.user as user_crud
from config import get_settings
from errors import (
    DuplicateEmail,
    ExpiredToken,
    InvalidCredentials,
    InvalidInput,
    InvalidToken,
    MissingToken,
)
from models.user import UserDB

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Хэш bcrypt с новой солью"""
    rounds = rounds or get_settings().bcrypt_rounds
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Сравнение с хэшем bcrypt за постоянное время"""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


@lru_cache
def _dummy_hash() -> str:
    # Проверяется для несуществующего email, чтобы время ответа не выдавало аккаунт
    return hash_password("dummy-password-for-timing")


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Выпустить подписанный токен для пользователя"""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.token_expire_seconds)
    issued_at = time.time()
    claims = {
        "sub": str(user_id),
        "iat": int(issued_at),
        "exp": int(issued_at + expires_delta.total_seconds()),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.token_algorithm)


def decode_access_token(token: str) -> dict:
    """Проверить подпись, затем срок действия; вернуть claims"""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.token_algorithm])
    except ExpiredSignatureError:
        raise ExpiredToken()
    except JWTError:
        raise InvalidToken()

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        raise InvalidToken()
    # exp в целых секундах: токен с нулевым сроком уже просрочен
    if exp <= time.time():
        raise ExpiredToken()
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise InvalidToken()
    return payload


def authenticate(token: Optional[str]) -> str:
    """Вернуть id пользователя по токену"""
    if not token:
        raise MissingToken()
    try:
        return decode_access_token(token)["sub"]
    except (InvalidToken, ExpiredToken) as e:
        logger.debug("Token rejected: %s", e.message)
        raise


def current_user_auth(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    """Зависимость FastAPI: id текущего пользователя из заголовка Authorization"""
    if credentials is None:
        raise MissingToken()
    return authenticate(credentials.credentials)


def _validate_registration(username: str, email: str, password: str) -> None:
    settings = get_settings()
    if not username or not email or not password:
        raise InvalidInput("Username, email and password are required")
    if not 3 <= len(username) <= 50:
        raise InvalidInput("Username must be between 3 and 50 characters")
    if not username.replace('_', '').replace('-', '').isalnum():
        raise InvalidInput("Username must be alphanumeric")
    if not EMAIL_RE.match(email):
        raise InvalidInput("Email address is not valid")
    if len(password) < settings.password_min_length:
        raise InvalidInput(f"Password must be at least {settings.password_min_length} characters")
    if len(password.encode()) > BCRYPT_MAX_BYTES:
        raise InvalidInput(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")


def register(db: Session, username: str, email: str, password: str) -> UserDB:
    """Зарегистрировать пользователя"""
    username = (username or "").strip()
    email = user_crud.normalize_email(email or "")
    password = password or ""
    _validate_registration(username, email, password)

    if user_crud.get_user_by_email(db, email):
        raise DuplicateEmail()
    user = user_crud.create_user(db, username=username, email=email, password_hash=hash_password(password))
    if user is None:
        raise DuplicateEmail()

    logger.info("Registered user %s (%s)", user.username, user.id)
    return user


def login(db: Session, email: str, password: str) -> str:
    """Проверить email и пароль, выпустить токен"""
    user = user_crud.get_user_by_email(db, email or "")
    if user is None:
        verify_password(password or "", _dummy_hash())
        logger.info("Failed login attempt")
        raise InvalidCredentials()
    if not verify_password(password or "", user.password_hash):
        logger.info("Failed login attempt")
        raise InvalidCredentials()

    logger.info("Login: %s (%s)", user.username, user.id)
    return create_access_token(user.id)
