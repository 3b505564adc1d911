"""
Локальный список задач, синхронизируемый с ответами сервера.

- ``load`` заменяет список целиком серверным;
- ``add``/``edit``/``toggle`` применяют только подтвержденные сервером записи;
  для правок ведется номер запроса на задачу, устаревшие ответы отбрасываются;
- ``remove`` убирает задачу сразу (оптимистично) и запоминает
  ``PendingOperation``; ``undo`` вызывает ее ``compensate``: отменяет
  незавершенный запрос или создает задачу заново, если сервер уже удалил ее
  (после отмены это проверяется запросом ``get_task``).

Ошибки не пробрасываются в интерфейс, а уходят в ``notify(level, message)``.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from client.api import ApiError, NotFoundError

logger = logging.getLogger(__name__)

FILTERS = ("all", "completed", "pending")


@dataclass
class Notification:
    level: str
    message: str


@dataclass
class PendingOperation:
    """Отменяемая операция: что удалено, откуда и как это вернуть"""
    op_id: str
    kind: str
    item: dict
    index: int
    compensate: Callable[["PendingOperation"], Awaitable[bool]]
    request: Optional[asyncio.Task] = None
    expiry: Optional[asyncio.TimerHandle] = None


class TaskListStore:
    def __init__(self, api, undo_window: float = 5.0, notify: Optional[Callable[[str, str], None]] = None):
        self.api = api
        self.undo_window = undo_window
        self.items: List[dict] = []
        self.notifications: List[Notification] = []
        self._notify = notify or self._collect
        self._pending: Dict[str, PendingOperation] = {}
        self._seq: Dict[str, int] = {}
        # Последнее запрошенное значение completed, пока запрос не завершен
        self._desired: Dict[str, bool] = {}

    def _collect(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    def _fail(self, action: str, error: ApiError) -> None:
        logger.warning("%s: %s", action, error)
        self._notify("error", f"{action}: {error.message}")

    def _index(self, task_id: str) -> int:
        for i, item in enumerate(self.items):
            if item["id"] == task_id:
                return i
        return -1

    def _reinsert(self, item: dict, index: int) -> None:
        if self._index(item["id"]) >= 0:
            return
        self.items.insert(min(index, len(self.items)), item)

    @property
    def pending_operations(self) -> Dict[str, PendingOperation]:
        return dict(self._pending)

    async def load(self) -> bool:
        """Заменить локальный список серверным"""
        try:
            tasks = await self.api.list_tasks()
        except ApiError as e:
            self._fail("Could not load tasks", e)
            return False
        # Задачи с незавершенным удалением не возвращаем в список
        deleting = {
            op.item["id"] for op in self._pending.values()
            if op.request is not None and not op.request.done()
        }
        self.items = [task for task in tasks if task["id"] not in deleting]
        return True

    async def add(self, text: str) -> Optional[dict]:
        if not (text or "").strip():
            self._notify("error", "Task text cannot be empty")
            return None
        try:
            task = await self.api.create_task(text)
        except ApiError as e:
            self._fail("Could not add task", e)
            return None
        self.items.append(task)
        return task

    async def _update(self, task_id: str, **fields) -> Optional[dict]:
        seq = self._seq.get(task_id, 0) + 1
        self._seq[task_id] = seq
        try:
            task = await self.api.update_task(task_id, **fields)
        except NotFoundError as e:
            if self._seq.get(task_id) == seq:
                self._desired.pop(task_id, None)
                index = self._index(task_id)
                if index >= 0:
                    del self.items[index]
            self._fail("Task no longer exists", e)
            return None
        except ApiError as e:
            if self._seq.get(task_id) == seq:
                self._desired.pop(task_id, None)
            self._fail("Could not update task", e)
            return None

        if self._seq.get(task_id) != seq:
            logger.debug("Discarding stale response #%d for task %s", seq, task_id)
            return None
        self._desired.pop(task_id, None)
        index = self._index(task_id)
        if index >= 0:
            self.items[index] = task
        return task

    async def edit(self, task_id: str, text: str) -> Optional[dict]:
        if not (text or "").strip():
            self._notify("error", "Task text cannot be empty")
            return None
        return await self._update(task_id, text=text)

    async def toggle(self, task_id: str) -> Optional[dict]:
        index = self._index(task_id)
        if index < 0:
            self._notify("error", "Task not found")
            return None
        # Переключаем относительно последнего запроса, а не подтвержденного состояния
        completed = not self._desired.get(task_id, self.items[index]["completed"])
        self._desired[task_id] = completed
        return await self._update(task_id, completed=completed)

    async def remove(self, task_id: str) -> Optional[str]:
        """Убрать задачу сразу и отправить удаление; вернуть op_id для undo"""
        index = self._index(task_id)
        if index < 0:
            self._notify("error", "Task not found")
            return None
        item = self.items.pop(index)
        op = PendingOperation(
            op_id=uuid.uuid4().hex,
            kind="delete",
            item=item,
            index=index,
            compensate=self._restore_deleted,
        )
        self._pending[op.op_id] = op
        op.request = asyncio.get_running_loop().create_task(self._send_delete(op))
        return op.op_id

    async def _send_delete(self, op: PendingOperation) -> bool:
        try:
            await self.api.delete_task(op.item["id"])
        except NotFoundError:
            logger.debug("Task %s was already deleted on the server", op.item["id"])
        except ApiError as e:
            # Если undo уже забрал операцию, восстанавливает он
            if self._pending.pop(op.op_id, None) is not None:
                self._reinsert(op.item, op.index)
                self._fail("Could not delete task", e)
            return False

        self._forget(op.item["id"])
        if op.op_id in self._pending:
            op.expiry = asyncio.get_running_loop().call_later(self.undo_window, self._expire, op.op_id)
        return True

    def _forget(self, task_id: str) -> None:
        self._seq.pop(task_id, None)
        self._desired.pop(task_id, None)

    def _expire(self, op_id: str) -> None:
        op = self._pending.pop(op_id, None)
        if op is not None:
            self._forget(op.item["id"])

    async def undo(self, op_id: str) -> bool:
        """Отменить удаление, пока операция в ожидании или в окне undo"""
        op = self._pending.pop(op_id, None)
        if op is None:
            return False
        if op.expiry is not None:
            op.expiry.cancel()
        return await op.compensate(op)

    async def _restore_deleted(self, op: PendingOperation) -> bool:
        deleted = False
        if op.request is not None:
            if not op.request.done():
                op.request.cancel()
            await asyncio.wait({op.request})
            if op.request.cancelled():
                # Сервер мог удалить задачу до отмены, ответ просто не дошел
                try:
                    await self.api.get_task(op.item["id"])
                except NotFoundError:
                    deleted = True
                except ApiError as e:
                    self._fail("Could not restore task", e)
                    return False
            else:
                deleted = op.request.result()

        item = op.item
        if deleted:
            try:
                item = await self.api.create_task(op.item["text"])
                if op.item.get("completed"):
                    item = await self.api.update_task(item["id"], completed=True)
            except ApiError as e:
                self._fail("Could not restore task", e)
                return False

        self._reinsert(item, op.index)
        self._notify("info", "Task restored")
        return True

    async def wait_pending(self) -> None:
        """Дождаться всех отправленных удалений"""
        requests = [op.request for op in list(self._pending.values()) if op.request is not None]
        if requests:
            await asyncio.wait(requests)

    def visible(self, filter: str = "all") -> List[dict]:
        if filter not in FILTERS:
            raise ValueError(f"Unknown filter: {filter}")
        if filter == "completed":
            return [t for t in self.items if t["completed"]]
        if filter == "pending":
            return [t for t in self.items if not t["completed"]]
        return list(self.items)

    def stats(self) -> Dict[str, int]:
        completed = sum(1 for t in self.items if t["completed"])
        return {"total": len(self.items), "completed": completed, "pending": len(self.items) - completed}
