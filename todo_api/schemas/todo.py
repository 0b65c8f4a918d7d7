"""Pydantic schemas for todo endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from todo_api.models.todo import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TodoPriority, TodoStatus

# Fields that may be omitted from an update but never explicitly set to null.
NON_NULLABLE_UPDATE_FIELDS = ("title", "description", "priority", "status")


class CreateTodoRequest(BaseModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    priority: TodoPriority = TodoPriority.MEDIUM
    due_date: datetime | None = None


class UpdateTodoRequest(BaseModel):
    """Partial update. Only fields present in the request body are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    priority: TodoPriority | None = None
    status: TodoStatus | None = None
    due_date: datetime | None = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "UpdateTodoRequest":
        for name in NON_NULLABLE_UPDATE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Field-presence map of the values the client actually sent."""
        return self.model_dump(exclude_unset=True)


class TodoResponse(BaseModel):
    id: str
    title: str
    description: str
    priority: TodoPriority
    status: TodoStatus
    user_id: str
    due_date: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TodoListResponse(BaseModel):
    data: list[TodoResponse]
    total: int
    page: int
    limit: int
    total_pages: int
