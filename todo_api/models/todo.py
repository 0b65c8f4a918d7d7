"""Todo model."""

import uuid
from enum import Enum

from sqlalchemy import Column, ForeignKey, String, Text

from todo_api.database import Base, UTCDateTime, utcnow

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class TodoPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TodoStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"

    def flipped(self) -> "TodoStatus":
        return TodoStatus.PENDING if self is TodoStatus.COMPLETED else TodoStatus.COMPLETED


class Todo(Base):
    """Task owned by a single user."""

    __tablename__ = "todos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=False, default="")
    priority = Column(String(10), nullable=False, default=TodoPriority.MEDIUM.value)
    status = Column(String(20), nullable=False, default=TodoStatus.PENDING.value)  # pending, completed
    due_date = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = Column(UTCDateTime, nullable=True, index=True)
