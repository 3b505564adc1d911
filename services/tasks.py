"""
Операции над задачами, всегда ограниченные владельцем.

``owner_id`` берется только из проверенного токена. Задача, которой нет,
и задача другого пользователя неразличимы для вызывающего: в обоих
случаях возникает ``NotFound``.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

import crud.task as task_crud
from errors import InvalidInput, NotFound
from models.task import TaskDB, TASK_TEXT_MAX_LENGTH

logger = logging.getLogger(__name__)


def clean_text(text: Optional[str]) -> str:
    """Обрезать пробелы и проверить текст задачи"""
    text = (text or "").strip()
    if not text:
        raise InvalidInput("Task text cannot be empty")
    if len(text) > TASK_TEXT_MAX_LENGTH:
        raise InvalidInput(f"Task text must be at most {TASK_TEXT_MAX_LENGTH} characters")
    return text


def list_tasks(db: Session, owner_id: str) -> List[TaskDB]:
    return task_crud.get_tasks(db, owner_id)


def get_task(db: Session, owner_id: str, task_id: str) -> TaskDB:
    task = task_crud.get_task(db, task_id, owner_id)
    if task is None:
        raise NotFound()
    return task


def create_task(db: Session, owner_id: str, text: Optional[str]) -> TaskDB:
    task = task_crud.create_task(db, owner_id, clean_text(text))
    logger.info("Task %s created by %s", task.id, owner_id)
    return task


def update_task(
        db: Session,
        owner_id: str,
        task_id: str,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
) -> TaskDB:
    """Применить только переданные поля"""
    values = {}
    if text is not None:
        values["text"] = clean_text(text)
    if completed is not None:
        values["completed"] = bool(completed)

    task = task_crud.update_task(db, task_id, owner_id, values)
    if task is None:
        raise NotFound()
    logger.info("Task %s updated by %s: %s", task_id, owner_id, sorted(values))
    return task


def delete_task(db: Session, owner_id: str, task_id: str) -> None:
    if not task_crud.delete_task(db, task_id, owner_id):
        raise NotFound()
    logger.info("Task %s deleted by %s", task_id, owner_id)


def task_stats(db: Session, owner_id: str) -> dict:
    return task_crud.get_task_stats(db, owner_id)
