from .todo import Todo, TodoCreate, TodoUpdate

__all__ = ["Todo", "TodoCreate", "TodoUpdate"]
