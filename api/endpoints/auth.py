from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import auth
import crud.user as user_crud
from auth import current_user_auth
from config import get_settings
from database import get_db
from errors import InvalidToken
from schemas.user import RegisterRequest, LoginRequest, UserResponse, TokenResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: RegisterRequest, db: Session = Depends(get_db)):
    """Зарегистрировать пользователя (email уникален)"""
    return auth.register(db, username=user.username, email=user.email, password=user.password)


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Вход по email и паролю; неверный email и неверный пароль не различаются"""
    token = auth.login(db, email=credentials.email, password=credentials.password)
    return TokenResponse(token=token, expires_in=get_settings().token_expire_seconds)


@router.get("/me", response_model=UserResponse)
def read_current_user(
        current_user_id: str = Depends(current_user_auth),
        db: Session = Depends(get_db)
):
    """Получить текущего пользователя"""
    user = user_crud.get_user(db, current_user_id)
    if user is None:
        raise InvalidToken()
    return user
