from .user import RegisterRequest, LoginRequest, UserResponse, TokenResponse
from .task import TaskCreate, TaskUpdate, TaskResponse, TaskStats
from .response import (
    StandardResponse,
    ErrorResponse,
    HealthCheckResponse,
    DeletedResponse,
)

__all__ = [
    # User schemas
    "RegisterRequest", "LoginRequest", "UserResponse", "TokenResponse",

    # Task schemas
    "TaskCreate", "TaskUpdate", "TaskResponse", "TaskStats",

    # Response schemas
    "StandardResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "DeletedResponse",
]
