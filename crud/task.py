from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from typing import List, Optional
import datetime

from models.task import TaskDB


def _owned(db: Session, task_id: str, owner_id: str):
    """Запрос задачи только по паре (id, владелец)"""
    return db.query(TaskDB).filter(TaskDB.id == task_id, TaskDB.owner_id == owner_id)


def get_task(db: Session, task_id: str, owner_id: str) -> Optional[TaskDB]:
    """Получить задачу владельца по ID"""
    return _owned(db, task_id, owner_id).first()


def get_tasks(db: Session, owner_id: str) -> List[TaskDB]:
    """Все задачи владельца, сначала новые (при равном времени по убыванию id)"""
    return (
        db.query(TaskDB)
        .filter(TaskDB.owner_id == owner_id)
        .order_by(desc(TaskDB.created_at), desc(TaskDB.id))
        .all()
    )


def create_task(db: Session, owner_id: str, text: str) -> TaskDB:
    """Создать новую задачу"""
    db_task = TaskDB(text=text, completed=False, owner_id=owner_id)
    db.add(db_task)
    db.commit()
    db.refresh(db_task)
    return db_task


def update_task(db: Session, task_id: str, owner_id: str, values: dict) -> Optional[TaskDB]:
    """Обновить поля задачи одним UPDATE ... WHERE id AND owner_id"""
    if not values:
        return get_task(db, task_id, owner_id)
    values = dict(values, updated_at=datetime.datetime.utcnow())
    updated = _owned(db, task_id, owner_id).update(values, synchronize_session=False)
    db.commit()
    if not updated:
        return None
    return get_task(db, task_id, owner_id)


def delete_task(db: Session, task_id: str, owner_id: str) -> bool:
    """Удалить задачу одним DELETE ... WHERE id AND owner_id"""
    deleted = _owned(db, task_id, owner_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0


def get_task_stats(db: Session, owner_id: str) -> dict:
    """Получить статистику по задачам владельца"""
    rows = (
        db.query(TaskDB.completed, func.count(TaskDB.id))
        .filter(TaskDB.owner_id == owner_id)
        .group_by(TaskDB.completed)
        .all()
    )
    result = {'total': 0, 'completed': 0, 'pending': 0}
    for completed, count in rows:
        result['completed' if completed else 'pending'] += count
        result['total'] += count
    return result
