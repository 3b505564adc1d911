from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config import get_settings


def build_engine(database_url: str):
    """Создать движок; для SQLite разрешаем работу из пула потоков FastAPI"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(get_settings().database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None) -> None:
    """Создать все таблицы, если их еще нет"""
    import models  # noqa: F401  регистрирует модели в Base.metadata

    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    """Сессия БД на время одного запроса"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
