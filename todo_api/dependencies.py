"""Authentication and service dependencies for FastAPI routes."""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from todo_api.database import get_db
from todo_api.errors import AuthError, AuthFailure
from todo_api.models.user import User
from todo_api.services.auth import AuthService
from todo_api.services.todo import TodoService

logger = logging.getLogger("todo_api")

BEARER_SCHEME = "Bearer"


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_todo_service(request: Request) -> TodoService:
    return request.app.state.todo_service


def extract_bearer_token(auth_header: str | None) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not auth_header:
        raise AuthError(AuthFailure.MISSING_CREDENTIALS)

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise AuthError(AuthFailure.MALFORMED_HEADER, "Invalid authorization header format")
    return parts[1]


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Resolve the caller from the Bearer token. Raises AuthError (401) if anything is off.

    The user is also attached to ``request.state.user`` for downstream code.
    """
    try:
        token = extract_bearer_token(request.headers.get("Authorization"))
        user = auth_service.resolve_token(db, token)
    except AuthError as exc:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.reason.value)
        raise

    request.state.user = user
    return user
