from pydantic import BaseModel, Field
from datetime import datetime


class RegisterRequest(BaseModel):
    # Содержательная проверка полей выполняется в auth.register
    username: str = Field(..., max_length=50)
    email: str = Field(..., max_length=255)
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
