"""Owner-scoped todo persistence."""

from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from todo_api.database import utcnow
from todo_api.models.todo import Todo
from todo_api.repositories.store import store_errors


@dataclass
class TodoFilter:
    """Optional list filters, ANDed together."""

    status: str | None = None
    priority: str | None = None
    search: str | None = None


class TodoRepository:
    """Todo store bound to a single owner.

    Every query this handle issues is restricted to ``owner_id`` and to rows that
    are not soft-deleted, so a todo belonging to someone else is simply absent.
    """

    def __init__(self, db: Session, owner_id: str) -> None:
        self.db = db
        self.owner_id = owner_id

    def _owned(self) -> Query:
        return self.db.query(Todo).filter(Todo.user_id == self.owner_id, Todo.deleted_at.is_(None))

    def get(self, todo_id: str) -> Todo | None:
        with store_errors(self.db):
            return self._owned().filter(Todo.id == todo_id).first()

    def find_page(self, filters: TodoFilter, offset: int, limit: int) -> tuple[list[Todo], int]:
        """Return one page of todos, newest first, plus the total match count."""
        query = self._owned()
        if filters.status:
            query = query.filter(Todo.status == filters.status)
        if filters.priority:
            query = query.filter(Todo.priority == filters.priority)
        if filters.search:
            query = query.filter(
                or_(
                    Todo.title.icontains(filters.search, autoescape=True),
                    Todo.description.icontains(filters.search, autoescape=True),
                )
            )

        with store_errors(self.db):
            total = query.count()
            items = query.order_by(Todo.created_at.desc(), Todo.id.desc()).offset(offset).limit(limit).all()
        return items, total

    def add(self, todo: Todo) -> Todo:
        todo.user_id = self.owner_id
        with store_errors(self.db):
            self.db.add(todo)
            self.db.commit()
            self.db.refresh(todo)
        return todo

    def save(self, todo: Todo) -> Todo:
        with store_errors(self.db):
            self.db.commit()
            self.db.refresh(todo)
        return todo

    def soft_delete(self, todo: Todo) -> None:
        todo.deleted_at = utcnow()
        with store_errors(self.db):
            self.db.commit()
