"""
CRUD operations over a TodoStore.

One TodoService owns one store for the lifetime of the process. Every
operation runs under a single lock: sync endpoints are dispatched onto
the server thread pool and may run concurrently.
"""
import logging
import threading
from datetime import datetime
from typing import List, Optional

from .errors import NotFound
from .schemas import Todo, TodoRequest, TodoStats
from .store import TodoStore
from .validator import validate_title

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


class TodoService:
    def __init__(self, store: Optional[TodoStore] = None, clock=_now):
        self.store = store if store is not None else TodoStore()
        self._clock = clock
        self._lock = threading.Lock()

    def create(self, request: TodoRequest) -> Todo:
        title = validate_title(request.title)
        with self._lock:
            ts = self._clock()
            todo = Todo(
                id=self.store.next_id(),
                title=title,
                description=request.description,
                completed=request.completed,
                created_at=ts,
                updated_at=ts,
            )
            self.store.insert(todo)
        logger.info("Todo created: id=%s title=%r", todo.id, todo.title)
        return todo.model_copy()

    def get(self, todo_id: int) -> Todo:
        with self._lock:
            todo = self.store.find(todo_id)
            if todo is None:
                raise NotFound()
            return todo.model_copy()

    def list(self, status_filter: Optional[str] = "all") -> List[Todo]:
        """Records matching ``status_filter`` in insertion order. Unknown filters mean all."""
        with self._lock:
            todos = self.store.list()
        if status_filter == "completed":
            todos = [t for t in todos if t.completed]
        elif status_filter == "pending":
            todos = [t for t in todos if not t.completed]
        return [t.model_copy() for t in todos]

    def update(self, todo_id: int, request: TodoRequest) -> Todo:
        # Overwrites every mutable field, completed included, even when the
        # caller meant to change only one of them.
        title = validate_title(request.title)
        with self._lock:
            current = self.store.find(todo_id)
            if current is None:
                raise NotFound()
            # keep updated_at monotonic if the wall clock steps back
            ts = max(self._clock(), current.updated_at)
            todo = self.store.replace(
                todo_id,
                {
                    "title": title,
                    "description": request.description,
                    "completed": request.completed,
                    "updated_at": ts,
                },
            )
        logger.info("Todo updated: id=%s completed=%s", todo.id, todo.completed)
        return todo.model_copy()

    def delete(self, todo_id: int) -> None:
        with self._lock:
            self.store.remove(todo_id)
        logger.info("Todo deleted: id=%s", todo_id)

    def stats(self) -> TodoStats:
        with self._lock:
            todos = self.store.list()
        total = 0
        completed = 0
        for todo in todos:
            total += 1
            if todo.completed:
                completed += 1
        return TodoStats(total=total, pending=total - completed, completed=completed)
