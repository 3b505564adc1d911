"""
Асинхронный HTTP-клиент Todo Tracker API.

Ошибки сервера превращаются в исключения ``ApiError`` с кодом ответа и
сообщением из ``ErrorResponse``.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Ошибка ответа API (status_code=0 для сетевых ошибок)"""

    def __init__(self, status_code: int, message: str, details: Any = None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(f"{status_code}: {message}")


class InvalidInputError(ApiError):
    pass


class UnauthorizedError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ConflictError(ApiError):
    pass


_ERRORS_BY_STATUS = {
    400: InvalidInputError,
    401: UnauthorizedError,
    404: NotFoundError,
    409: ConflictError,
}


class TodoApiClient:
    def __init__(
            self,
            base_url: str = "http://localhost:8000",
            token: Optional[str] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
            timeout: float = 10.0,
    ):
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "TodoApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(0, f"Network error: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            if not isinstance(body, dict):
                body = {}
            error_cls = _ERRORS_BY_STATUS.get(response.status_code, ApiError)
            raise error_cls(
                response.status_code,
                body.get("error") or response.reason_phrase,
                body.get("details"),
            )
        return response.json()

    # Аутентификация

    async def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    async def login(self, email: str, password: str) -> str:
        """Войти и запомнить токен для следующих запросов"""
        data = await self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/auth/me")

    # Задачи

    async def list_tasks(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/todos")

    async def get_task(self, task_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/todos/{task_id}")

    async def create_task(self, text: str) -> Dict[str, Any]:
        return await self._request("POST", "/api/todos", json={"text": text})

    async def update_task(
            self,
            task_id: str,
            text: Optional[str] = None,
            completed: Optional[bool] = None,
    ) -> Dict[str, Any]:
        payload = {}
        if text is not None:
            payload["text"] = text
        if completed is not None:
            payload["completed"] = completed
        return await self._request("PUT", f"/api/todos/{task_id}", json=payload)

    async def delete_task(self, task_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/todos/{task_id}")

    async def task_stats(self) -> Dict[str, int]:
        return await self._request("GET", "/api/todos/stats")
