import pytest
import os
import sys
from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

os.environ["TESTING"] = "1"
# Должно быть задано до первого импорта config
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["TOKEN_EXPIRE_SECONDS"] = "3600"


@pytest.fixture(scope="session")
def test_database_url():
    """URL тестовой базы данных"""
    return "sqlite:///:memory:"


@pytest.fixture(scope="session")
def engine(test_database_url):
    """Движок тестовой БД"""
    engine = create_engine(
        test_database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    return engine


@pytest.fixture(scope="session")
def create_tables(engine):
    """Создание таблиц перед всеми тестами"""
    from database import Base
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine, create_tables) -> Generator[Session, None, None]:
    """Фикстура для сессии БД с rollback после каждого теста"""
    connection = engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection)()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def app(db_session):
    """Приложение, в котором get_db отдает тестовую сессию"""
    from main import app
    from database import get_db

    app.dependency_overrides[get_db] = lambda: db_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    return TestClient(app)


@pytest.fixture
def sample_user_data():
    """Тестовые данные пользователя"""
    return {
        "username": "alice",
        "email": "alice@x.com",
        "password": "pw1234567",
    }


@pytest.fixture
def registered_user(db_session, sample_user_data):
    import auth

    return auth.register(db_session, **sample_user_data)


@pytest.fixture
def other_user(db_session):
    import auth

    return auth.register(db_session, username="bob", email="bob@x.com", password="bobsecret1")


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(registered_user):
    import auth

    return bearer(auth.create_access_token(registered_user.id))


@pytest.fixture
def other_headers(other_user):
    import auth

    return bearer(auth.create_access_token(other_user.id))


@pytest.fixture
def headers_for():
    """Заголовок Authorization для произвольного токена"""
    return bearer
