from typing import Dict, List, Optional

from .errors import NotFound
from .schemas import Todo


# Simple in-memory record store. Lives as long as the process does.
# Not thread-safe on its own: TodoService holds the lock around every call.
class TodoStore:
    def __init__(self):
        self._todos: List[Todo] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._todos)

    def list(self) -> List[Todo]:
        return list(self._todos)

    def find(self, todo_id: int) -> Optional[Todo]:
        for todo in self._todos:
            if todo.id == todo_id:
                return todo
        return None

    def insert(self, todo: Todo) -> None:
        if todo.id is None or todo.id < 1:
            raise ValueError("todo must carry an assigned id before insert")
        self._todos.append(todo)

    def replace(self, todo_id: int, fields: Dict) -> Todo:
        """Overwrite title/description/completed/updated_at in place."""
        for i, todo in enumerate(self._todos):
            if todo.id == todo_id:
                allowed = {k: fields[k] for k in ("title", "description", "completed", "updated_at") if k in fields}
                self._todos[i] = todo.model_copy(update=allowed)
                return self._todos[i]
        raise NotFound()

    def remove(self, todo_id: int) -> Todo:
        for i, todo in enumerate(self._todos):
            if todo.id == todo_id:
                return self._todos.pop(i)
        raise NotFound()

    def next_id(self) -> int:
        # never decremented, ids are not reused after delete
        current = self._next_id
        self._next_id += 1
        return current
