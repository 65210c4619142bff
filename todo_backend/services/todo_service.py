"""Todo service - request validation in front of the repository."""

from __future__ import annotations

from typing import List, Optional

from ..errors import ValidationError
from ..models.todo import Todo, TodoCreate, TodoUpdate
from ..repositories.todo_repository import TodoRepository

# ids are stored in a SERIAL (int4) column
MAX_TODO_ID = 2**31 - 1


def _require_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Missing or empty 'name' field")
    return name


def _check_id(todo_id: int) -> int:
    if not -MAX_TODO_ID - 1 <= todo_id <= MAX_TODO_ID:
        raise ValidationError("Invalid 'id' query parameter: out of range")
    return todo_id


class TodoService:
    """Service for todo business logic."""

    def __init__(self, repository: TodoRepository) -> None:
        self.repository = repository

    async def list_todos(self) -> List[Todo]:
        return await self.repository.list_todos()

    async def get_todo(self, todo_id: int) -> Todo:
        return await self.repository.get_by_id(_check_id(todo_id))

    async def get_todo_by_name(self, name: str) -> Todo:
        return await self.repository.get_by_name(_require_name(name))

    async def create_todo(self, todo_data: TodoCreate) -> Todo:
        name = _require_name(todo_data.name)
        return await self.repository.create(name, todo_data.description)

    async def mark_done(self, todo_id: int) -> Todo:
        return await self.repository.mark_done(_check_id(todo_id))

    async def update_todo(self, todo_id: int, todo_data: TodoUpdate) -> Todo:
        _check_id(todo_id)
        name = _require_name(todo_data.name)
        return await self.repository.update(todo_id, name, todo_data.description, todo_data.done)

    async def delete_todo(self, todo_id: int) -> str:
        deleted_id = await self.repository.delete(_check_id(todo_id))
        return f"Todo with id {deleted_id} successfully deleted"
