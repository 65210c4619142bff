"""API dependencies for todo management."""

from fastapi import Depends, Request

from ..db import Database
from ..errors import StoreError
from ..repositories.todo_repository import TodoRepository
from ..services.todo_service import TodoService


def get_database(request: Request) -> Database:
    """Dependency for the shared database created at startup."""
    database = getattr(request.app.state, "database", None)
    if database is None or not database.is_connected:
        raise StoreError("Database pool is not initialized")
    return database


def get_todo_repository(database: Database = Depends(get_database)) -> TodoRepository:
    return TodoRepository(database)


def get_todo_service(
    repository: TodoRepository = Depends(get_todo_repository),
) -> TodoService:
    return TodoService(repository)
