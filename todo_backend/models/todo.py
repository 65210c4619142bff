"""Todo data models using Pydantic."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator


class TodoBase(BaseModel):
    """Fields shared by every todo payload."""

    name: str
    description: str


class TodoCreate(TodoBase):
    """Model for creating new todos."""


class TodoUpdate(TodoBase):
    """Model for overwriting an existing todo."""

    done: StrictBool

    @field_validator("done", mode="before")
    @classmethod
    def parse_done(cls, value: Any) -> Any:
        # the text client sends the flag as "true"/"false"
        if value == "true":
            return True
        if value == "false":
            return False
        return value


class Todo(TodoBase):
    """Complete todo row as stored."""

    id: int
    done: bool = False

    model_config = ConfigDict(from_attributes=True)
