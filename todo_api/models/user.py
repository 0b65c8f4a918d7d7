"""User model."""

import uuid

from sqlalchemy import Column, Index, String

from todo_api.database import Base, UTCDateTime, utcnow


class User(Base):
    """Application user."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(256), nullable=False)
    password_hash = Column(String(256), nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = Column(UTCDateTime, nullable=True, index=True)

    # One live account per email; soft-deleted rows keep theirs.
    __table_args__ = (
        Index(
            "ix_users_email_live",
            "email",
            unique=True,
            sqlite_where=deleted_at.is_(None),
            postgresql_where=deleted_at.is_(None),
        ),
    )

    def __repr__(self) -> str:
        return f"<User {self.id}>"
