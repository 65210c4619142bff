"""Todo repository - data access layer."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import asyncpg

from ..db import Database
from ..errors import ConflictError, NotFoundError, StoreError, TodoError, ValidationError
from ..models.todo import Todo

logger = logging.getLogger(__name__)

SELECT_ALL = """
    SELECT id, name, description, done
    FROM todos
    ORDER BY id;
"""

SELECT_BY_ID = """
    SELECT id, name, description, done
    FROM todos
    WHERE id = $1;
"""

SELECT_BY_NAME = """
    SELECT id, name, description, done
    FROM todos
    WHERE name = $1;
"""

EXISTS_BY_ID = "SELECT 1 FROM todos WHERE id = $1;"

EXISTS_BY_NAME = "SELECT 1 FROM todos WHERE name = $1;"

INSERT = """
    INSERT INTO todos (name, description)
    VALUES ($1, $2)
    RETURNING id, name, description, done;
"""

MARK_DONE = """
    UPDATE todos
    SET done = TRUE
    WHERE id = $1
    RETURNING id, name, description, done;
"""

UPDATE = """
    UPDATE todos
    SET name = $1,
        description = $2,
        done = $3
    WHERE id = $4
    RETURNING id, name, description, done;
"""

DELETE = "DELETE FROM todos WHERE id = $1;"

STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def _row_to_todo(row: Optional[asyncpg.Record]) -> Optional[Todo]:
    if row is None:
        return None
    return Todo.model_validate(dict(row))


def _affected_rows(status: str) -> int:
    # asyncpg returns the command tag, e.g. "DELETE 1"
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


def _log_db_error(action: str, details: Dict[str, Any]) -> None:
    summary = {key: type(value).__name__ for key, value in details.items()}
    logger.exception("Database %s failed (types=%s)", action, summary)


@contextmanager
def _store_errors(action: str, **details: Any) -> Iterator[None]:
    try:
        yield
    except TodoError:
        raise
    except STORE_ERRORS as exc:
        _log_db_error(action, details)
        raise StoreError(f"Database error: {exc}") from exc


def _not_found(todo_id: int) -> NotFoundError:
    return NotFoundError(f"Todo with id {todo_id} does not exist")


class TodoRepository:
    """Repository for todo rows stored in PostgreSQL.

    Every mutating call performs an existence or uniqueness read before its
    write so that callers get a specific error. The write result stays
    authoritative: a write that touches no row is reported as not found,
    and a unique violation on ``name`` is reported as a conflict.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    async def list_todos(self) -> List[Todo]:
        with _store_errors("list_todos"):
            async with self.database.connection() as conn:
                rows = await conn.fetch(SELECT_ALL)
        return [Todo.model_validate(dict(row)) for row in rows]

    async def get_by_id(self, todo_id: int) -> Todo:
        with _store_errors("get_by_id", todo_id=todo_id):
            async with self.database.connection() as conn:
                row = await conn.fetchrow(SELECT_BY_ID, todo_id)
        todo = _row_to_todo(row)
        if todo is None:
            raise NotFoundError(f"Todo with id '{todo_id}' not found")
        return todo

    async def get_by_name(self, name: str) -> Todo:
        with _store_errors("get_by_name", name=name):
            async with self.database.connection() as conn:
                row = await conn.fetchrow(SELECT_BY_NAME, name)
        todo = _row_to_todo(row)
        if todo is None:
            raise NotFoundError(f"Todo with name '{name}' not found")
        return todo

    async def create(self, name: str, description: str) -> Todo:
        with _store_errors("create", name=name):
            async with self.database.connection() as conn:
                if await conn.fetchrow(EXISTS_BY_NAME, name) is not None:
                    logger.info("Rejected duplicate todo name")
                    raise ConflictError("Todo with that name already exists")
                try:
                    row = await conn.fetchrow(INSERT, name, description)
                except asyncpg.UniqueViolationError as exc:
                    logger.info("Concurrent insert hit the unique name constraint")
                    raise ConflictError("Todo with that name already exists") from exc
        todo = _row_to_todo(row)
        if todo is None:
            raise StoreError("Todo was created but could not be retrieved")
        logger.info("Created todo id=%s", todo.id)
        return todo

    async def mark_done(self, todo_id: int) -> Todo:
        with _store_errors("mark_done", todo_id=todo_id):
            async with self.database.connection() as conn:
                if await conn.fetchrow(EXISTS_BY_ID, todo_id) is None:
                    raise _not_found(todo_id)
                row = await conn.fetchrow(MARK_DONE, todo_id)
        todo = _row_to_todo(row)
        if todo is None:
            raise _not_found(todo_id)
        return todo

    async def update(self, todo_id: int, name: str, description: str, done: bool) -> Todo:
        if not name.strip():
            raise ValidationError("Missing or empty 'name' field")
        with _store_errors("update", todo_id=todo_id, name=name):
            async with self.database.connection() as conn:
                if await conn.fetchrow(EXISTS_BY_ID, todo_id) is None:
                    raise _not_found(todo_id)
                try:
                    row = await conn.fetchrow(UPDATE, name, description, done, todo_id)
                except asyncpg.UniqueViolationError as exc:
                    raise ConflictError("Todo with that name already exists") from exc
        todo = _row_to_todo(row)
        if todo is None:
            raise _not_found(todo_id)
        return todo

    async def delete(self, todo_id: int) -> int:
        with _store_errors("delete", todo_id=todo_id):
            async with self.database.connection() as conn:
                if await conn.fetchrow(EXISTS_BY_ID, todo_id) is None:
                    raise _not_found(todo_id)
                status = await conn.execute(DELETE, todo_id)
        removed = _affected_rows(status)
        if removed == 0:
            raise _not_found(todo_id)
        if removed != 1:
            logger.error("Delete of todo id=%s removed %s rows", todo_id, removed)
            raise StoreError("Todo was not deleted due to an unknown error")
        logger.info("Deleted todo id=%s", todo_id)
        return todo_id
