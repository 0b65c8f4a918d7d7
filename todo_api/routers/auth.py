"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from todo_api.database import get_db
from todo_api.dependencies import get_auth_service, get_current_user
from todo_api.models.user import User
from todo_api.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from todo_api.services.auth import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Register a new user account."""
    user = auth_service.register(db, body.email, body.name, body.password)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Authenticate and receive a JWT token.

    There is no logout endpoint: tokens are not revocable, clients discard them.
    """
    result = auth_service.login(db, body.email, body.password)
    return LoginResponse(token=result.token, user=UserResponse.model_validate(result.user))


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated user."""
    return UserResponse.model_validate(user)
