from .api import (
    TodoApiClient,
    ApiError,
    InvalidInputError,
    UnauthorizedError,
    NotFoundError,
    ConflictError,
)
from .store import TaskListStore, PendingOperation, Notification

__all__ = [
    "TodoApiClient",
    "ApiError",
    "InvalidInputError",
    "UnauthorizedError",
    "NotFoundError",
    "ConflictError",
    "TaskListStore",
    "PendingOperation",
    "Notification",
]
