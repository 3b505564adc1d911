from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

DEFAULT_SECRET_KEY = "change-me-todo-secret-key"


class Settings(BaseSettings):
    """Настройки сервиса из переменных окружения (и .env)"""

    # База данных
    database_url: str = "sqlite:///./todos.db"

    # Сервер
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Токены
    secret_key: str = DEFAULT_SECRET_KEY
    token_algorithm: str = "HS256"
    token_expire_seconds: int = 60 * 60 * 24

    # Пароли
    password_min_length: int = 8
    bcrypt_rounds: int = 12

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
