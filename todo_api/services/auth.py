"""Authentication service."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from todo_api.errors import AuthError, AuthFailure, ConflictError
from todo_api.models.user import User
from todo_api.repositories.user import DUPLICATE_EMAIL, UserRepository
from todo_api.services.jwt import TokenService
from todo_api.services.password import PasswordHasher

logger = logging.getLogger("todo_api")


@dataclass
class LoginResult:
    """Authenticated user plus the session token issued for them."""

    user: User
    token: str


class AuthService:
    """Handles user registration, login and bearer token resolution."""

    def __init__(self, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.hasher = hasher
        self.tokens = tokens

    def register(self, db: Session, email: str, name: str, password: str) -> User:
        """Register a new user. Raises ConflictError if the email is already registered."""
        users = UserRepository(db)
        if users.get_by_email(email):
            raise ConflictError(DUPLICATE_EMAIL)

        password_hash = self.hasher.hash(password)
        user = users.create(email=email, name=name, password_hash=password_hash)
        logger.info("User registered: %s", user.id)
        return user

    def login(self, db: Session, email: str, password: str) -> LoginResult:
        """Authenticate by email and password.

        Unknown emails and wrong passwords raise the same InvalidCredentials error.
        """
        user = UserRepository(db).get_by_email(email)
        if not user or not self.hasher.verify(password, user.password_hash):
            logger.warning("Login failed for %s", email)
            raise AuthError(AuthFailure.INVALID_CREDENTIALS)

        token = self.tokens.issue(user.id)
        logger.info("User logged in: %s", user.id)
        return LoginResult(user=user, token=token)

    def resolve_token(self, db: Session, token: str) -> User:
        """Validate a bearer token and load the live user it names."""
        subject = self.tokens.validate(token)
        user = UserRepository(db).get_by_id(subject)
        if not user:
            raise AuthError(AuthFailure.UNKNOWN_SUBJECT)
        return user
