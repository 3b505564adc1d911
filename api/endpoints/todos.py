from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from auth import current_user_auth
from database import get_db
from schemas.task import TaskResponse, TaskCreate, TaskUpdate, TaskStats
from schemas.response import DeletedResponse, ErrorResponse, StandardResponse
import services.tasks as task_service

# 404 означает "нет такой задачи у текущего пользователя":
# чужая задача и несуществующая задача намеренно неразличимы.
router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    },
)

_not_found = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


@router.get("", response_model=List[TaskResponse])
def read_tasks(
        current_user_id: str = Depends(current_user_auth),
        db: Session = Depends(get_db)
):
    """Получить задачи текущего пользователя, сначала новые"""
    return task_service.list_tasks(db, current_user_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
        task: TaskCreate,
        current_user_id: str = Depends(current_user_auth),
        db: Session = Depends(get_db)
):
    """Создать новую задачу"""
    return task_service.create_task(db, current_user_id, task.text)


@router.get("/stats", response_model=TaskStats)
def read_task_stats(
        current_user_id: str = Depends(current_user_auth),
        db: Session = Depends(get_db)
):
    """Статистика: всего, выполнено, осталось"""
    return task_service.task_stats(db, current_user_id)


@router.get("/{task_id}", response_model=TaskResponse, responses=_not_found)
def read_task(
        task_id: str,
        current_user_id: str = Depends(current_user_auth),
        db: Session = Depends(get_db)
):
    """Получить задачу по ID"""
    return task_service.get_task(db, current_user_id, task_id)


@router.put("/{task_id}", response_model=TaskResponse, responses=_not_found)
def update_task(
        task_id: str,
        task: TaskUpdate,
        current_user_id: str = Depends(current_user_auth),
        db: Session = Depends(get_db)
):
    """Обновить текст и/или статус задачи"""
    update_data = task.model_dump(exclude_unset=True)
    return task_service.update_task(
        db,
        current_user_id,
        task_id,
        text=update_data.get("text"),
        completed=update_data.get("completed"),
    )


@router.delete("/{task_id}", response_model=StandardResponse, responses=_not_found)
def delete_task(
        task_id: str,
        current_user_id: str = Depends(current_user_auth),
        db: Session = Depends(get_db)
):
    """Удалить задачу"""
    task_service.delete_task(db, current_user_id, task_id)
    return DeletedResponse(message="Task deleted successfully")
