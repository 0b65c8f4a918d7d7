"""Todo service: ownership-scoped CRUD and listing."""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from todo_api.database import as_utc
from todo_api.errors import NotFoundError, ValidationError
from todo_api.models.todo import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Todo,
    TodoPriority,
    TodoStatus,
)
from todo_api.repositories.todo import TodoFilter, TodoRepository

logger = logging.getLogger("todo_api")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

UPDATABLE_FIELDS = ("title", "description", "priority", "status", "due_date")
TODO_NOT_FOUND = "Todo not found"


@dataclass
class TodoPage:
    """One page of a todo listing."""

    items: list[Todo]
    total: int
    page: int
    limit: int
    total_pages: int


def normalize_paging(page: int, limit: int) -> tuple[int, int]:
    """Page below 1 becomes 1; a limit outside [1, MAX_LIMIT] becomes the default."""
    if page < 1:
        page = DEFAULT_PAGE
    if limit < 1 or limit > MAX_LIMIT:
        limit = DEFAULT_LIMIT
    return page, limit


def _enum_value(enum_cls: type[TodoPriority] | type[TodoStatus], field: str, value: Any) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError.for_field(field, f"must be one of: {allowed}") from None


def _clean_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Validate todo fields and return them with enums reduced to their stored values."""
    errors = []
    cleaned: dict[str, Any] = {}

    for name, value in fields.items():
        if name not in UPDATABLE_FIELDS:
            errors.append({"field": name, "message": "unknown field"})
        elif name == "due_date":
            if value is not None and not isinstance(value, datetime):
                errors.append({"field": name, "message": "must be a datetime"})
            else:
                cleaned[name] = as_utc(value) if value is not None else None
        elif value is None:
            errors.append({"field": name, "message": "cannot be null"})
        elif name == "title":
            if not isinstance(value, str) or not 1 <= len(value) <= TITLE_MAX_LENGTH:
                errors.append({"field": name, "message": f"must be 1-{TITLE_MAX_LENGTH} characters"})
            else:
                cleaned[name] = value
        elif name == "description":
            if not isinstance(value, str) or len(value) > DESCRIPTION_MAX_LENGTH:
                errors.append({"field": name, "message": f"must be at most {DESCRIPTION_MAX_LENGTH} characters"})
            else:
                cleaned[name] = value
        else:
            enum_cls = TodoPriority if name == "priority" else TodoStatus
            try:
                cleaned[name] = _enum_value(enum_cls, name, value)
            except ValidationError as exc:
                errors.extend(exc.errors)

    if errors:
        raise ValidationError(errors=errors)
    return cleaned


class TodoService:
    """Handles todo creation, retrieval, listing, updates and deletion.

    Every operation goes through ``scoped``, which binds a repository to the
    caller's user id; a todo owned by another user is reported as not found.
    """

    def scoped(self, db: Session, owner_id: str) -> TodoRepository:
        return TodoRepository(db, owner_id)

    def _get_or_404(self, todos: TodoRepository, todo_id: str) -> Todo:
        todo = todos.get(todo_id)
        if not todo:
            raise NotFoundError(TODO_NOT_FOUND)
        return todo

    def create(
        self,
        db: Session,
        owner_id: str,
        title: str,
        description: str = "",
        priority: TodoPriority | str | None = None,
        due_date: datetime | None = None,
    ) -> Todo:
        """Create a todo for the owner. New todos are always pending."""
        fields = _clean_fields(
            {
                "title": title,
                "description": description,
                "priority": priority or TodoPriority.MEDIUM,
                "due_date": due_date,
            }
        )
        todo = Todo(status=TodoStatus.PENDING.value, **fields)
        self.scoped(db, owner_id).add(todo)
        logger.info("Todo %s created by %s", todo.id, owner_id)
        return todo

    def get(self, db: Session, owner_id: str, todo_id: str) -> Todo:
        return self._get_or_404(self.scoped(db, owner_id), todo_id)

    def list(
        self,
        db: Session,
        owner_id: str,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
        status: TodoStatus | str | None = None,
        priority: TodoPriority | str | None = None,
        search: str | None = None,
    ) -> TodoPage:
        """List the owner's todos, newest first, with optional ANDed filters."""
        page, limit = normalize_paging(page, limit)
        filters = TodoFilter(
            status=_enum_value(TodoStatus, "status", status) if status else None,
            priority=_enum_value(TodoPriority, "priority", priority) if priority else None,
            search=search or None,
        )

        items, total = self.scoped(db, owner_id).find_page(filters, offset=(page - 1) * limit, limit=limit)
        return TodoPage(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )

    def update(self, db: Session, owner_id: str, todo_id: str, changes: Mapping[str, Any]) -> Todo:
        """Apply a partial update. Fields absent from ``changes`` are left untouched."""
        fields = _clean_fields(changes)
        todos = self.scoped(db, owner_id)
        todo = self._get_or_404(todos, todo_id)

        for name, value in fields.items():
            setattr(todo, name, value)
        todos.save(todo)
        logger.info("Todo %s updated by %s (%s)", todo.id, owner_id, ", ".join(sorted(fields)) or "no changes")
        return todo

    def toggle_status(self, db: Session, owner_id: str, todo_id: str) -> Todo:
        """Flip pending <-> completed."""
        todos = self.scoped(db, owner_id)
        todo = self._get_or_404(todos, todo_id)

        todo.status = TodoStatus(todo.status).flipped().value
        todos.save(todo)
        logger.info("Todo %s toggled to %s by %s", todo.id, todo.status, owner_id)
        return todo

    def delete(self, db: Session, owner_id: str, todo_id: str) -> None:
        """Soft-delete a todo. Later reads treat it as gone."""
        todos = self.scoped(db, owner_id)
        todo = self._get_or_404(todos, todo_id)

        todos.soft_delete(todo)
        logger.info("Todo %s deleted by %s", todo_id, owner_id)
