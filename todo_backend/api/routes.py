"""API routes for todo management."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from ..errors import ValidationError
from ..models.todo import TodoCreate, TodoUpdate
from ..services.todo_service import TodoService
from . import envelope
from .dependencies import get_todo_service

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("")
async def list_todos(service: TodoService = Depends(get_todo_service)) -> JSONResponse:
    """List every todo."""
    todos = await service.list_todos()
    return envelope.success("todos", todos)


@router.post("")
async def create_todo(
    todo_data: TodoCreate,
    service: TodoService = Depends(get_todo_service),
) -> JSONResponse:
    """Create a todo; the name must not be taken."""
    todo = await service.create_todo(todo_data)
    return envelope.success("todo", todo, status_code=status.HTTP_201_CREATED)


@router.get("/todo")
async def get_todo(
    todo_id: Optional[int] = Query(None, alias="id"),
    name: Optional[str] = Query(None),
    service: TodoService = Depends(get_todo_service),
) -> JSONResponse:
    """Fetch a single todo by id, or by name when no id is given."""
    if todo_id is not None:
        todo = await service.get_todo(todo_id)
    elif name is not None:
        todo = await service.get_todo_by_name(name)
    else:
        raise ValidationError("Missing 'id' or 'name' query parameter")
    return envelope.success("todo", todo)


@router.patch("/todo")
async def mark_todo_done(
    todo_id: int = Query(..., alias="id"),
    service: TodoService = Depends(get_todo_service),
) -> JSONResponse:
    """Mark a todo as done."""
    todo = await service.mark_done(todo_id)
    return envelope.success("todo", todo)


@router.put("/todo")
async def update_todo(
    todo_data: TodoUpdate,
    todo_id: int = Query(..., alias="id"),
    service: TodoService = Depends(get_todo_service),
) -> JSONResponse:
    """Overwrite name, description and done flag of a todo."""
    todo = await service.update_todo(todo_id, todo_data)
    return envelope.success("todo", todo)


@router.delete("/todo")
async def delete_todo(
    todo_id: int = Query(..., alias="id"),
    service: TodoService = Depends(get_todo_service),
) -> JSONResponse:
    """Delete a todo permanently."""
    message = await service.delete_todo(todo_id)
    return envelope.success("message", message)
