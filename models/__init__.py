from .user import UserDB
from .task import TaskDB

__all__ = ["UserDB", "TaskDB"]
