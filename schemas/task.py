from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class TaskCreate(BaseModel):
    text: str = Field(..., description="Текст задачи, обрезается по краям")


class TaskUpdate(BaseModel):
    text: Optional[str] = None
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    id: str
    text: str
    completed: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskStats(BaseModel):
    """Статистика по задачам пользователя"""
    total: int = 0
    completed: int = 0
    pending: int = 0
