import logging
import sys

from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.endpoints import auth_router, todos_router
from config import get_settings, DEFAULT_SECRET_KEY
from database import get_db, init_db
from errors import TodoError, Unauthorized, InvalidCredentials
from schemas.response import ErrorResponse, HealthCheckResponse

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s: %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "sqlalchemy.engine"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, details=None, headers=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(mode="json")
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Преобразование ошибок в ErrorResponse"""

    @app.exception_handler(TodoError)
    async def todo_error_handler(request: Request, exc: TodoError):
        headers = None
        if isinstance(exc, (Unauthorized, InvalidCredentials)):
            headers = {"WWW-Authenticate": "Bearer"}
        return _error_response(exc.status_code, exc.message, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid input", details=details)

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        # Детали внутренних ошибок клиенту не отдаем
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    app = FastAPI(title="Todo Tracker Service", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(auth_router)
    app.include_router(todos_router)

    @app.on_event("startup")
    def on_startup():
        """Создает таблицы при запуске"""
        if settings.secret_key == DEFAULT_SECRET_KEY:
            logger.warning("SECRET_KEY is not set, using the insecure default")
        init_db()
        logger.info("Todo Tracker Service started")

    @app.get("/")
    def read_root():
        return {"message": "Todo Tracker Service API"}

    @app.get("/health", response_model=HealthCheckResponse)
    def health_check(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
            database = "healthy"
        except SQLAlchemyError:
            logger.exception("Database health check failed")
            database = "unavailable"
        return HealthCheckResponse(
            success=database == "healthy",
            message="Service is running",
            service="todo-tracker",
            database=database,
        )

    return app


app = create_app()

#Запуск через консоль: uvicorn main:app --reload
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port)
