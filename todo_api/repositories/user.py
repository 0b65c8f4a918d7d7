"""User persistence."""

from sqlalchemy.orm import Session

from todo_api.models.user import User
from todo_api.repositories.store import store_errors

DUPLICATE_EMAIL = "User with this email already exists"


class UserRepository:
    """Reads and writes live (non-deleted) users."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _live(self):
        return self.db.query(User).filter(User.deleted_at.is_(None))

    def get_by_id(self, user_id: str) -> User | None:
        with store_errors(self.db):
            return self._live().filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> User | None:
        with store_errors(self.db):
            return self._live().filter(User.email == email).first()

    def create(self, email: str, name: str, password_hash: str) -> User:
        """Insert a user. Raises ConflictError if the email is taken by a live user."""
        user = User(email=email, name=name, password_hash=password_hash)
        with store_errors(self.db, conflict=DUPLICATE_EMAIL):
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        return user
