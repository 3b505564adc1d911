from fastapi import status


class TodoError(Exception):
    """Базовая ошибка предметной области"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(TodoError):
    """Некорректные данные, пользователь может их исправить"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class InvalidCredentials(TodoError):
    """Неверный email или пароль (намеренно не различаются)"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class DuplicateEmail(TodoError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email already registered"


class NotFound(TodoError):
    """Объект не существует или принадлежит другому пользователю"""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


class Unauthorized(TodoError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class MissingToken(Unauthorized):
    default_message = "Missing bearer token"


class InvalidToken(Unauthorized):
    default_message = "Invalid token"


class ExpiredToken(Unauthorized):
    default_message = "Token expired"
