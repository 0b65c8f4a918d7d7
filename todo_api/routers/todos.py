"""Todo API endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from todo_api.database import get_db
from todo_api.dependencies import get_current_user, get_todo_service
from todo_api.models.todo import TodoPriority, TodoStatus
from todo_api.models.user import User
from todo_api.schemas.todo import CreateTodoRequest, TodoListResponse, TodoResponse, UpdateTodoRequest
from todo_api.services.todo import DEFAULT_LIMIT, DEFAULT_PAGE, TodoService

router = APIRouter(prefix="/api/v1/todos", tags=["Todos"])


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def create_todo(
    body: CreateTodoRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    """Create a todo. New todos always start as pending."""
    todo = service.create(
        db,
        user.id,
        title=body.title,
        description=body.description,
        priority=body.priority,
        due_date=body.due_date,
    )
    return TodoResponse.model_validate(todo)


@router.get("", response_model=TodoListResponse)
def list_todos(
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    status_filter: TodoStatus | None = Query(default=None, alias="status"),
    priority_filter: TodoPriority | None = Query(default=None, alias="priority"),
    search: str | None = Query(default=None, max_length=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: TodoService = Depends(get_todo_service),
) -> TodoListResponse:
    """List todos with pagination, filters and text search."""
    result = service.list(
        db,
        user.id,
        page=page,
        limit=limit,
        status=status_filter,
        priority=priority_filter,
        search=search,
    )
    return TodoListResponse(
        data=[TodoResponse.model_validate(todo) for todo in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/{todo_id}", response_model=TodoResponse)
def get_todo(
    todo_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    """Get a single todo by ID."""
    return TodoResponse.model_validate(service.get(db, user.id, todo_id))


@router.put("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    body: UpdateTodoRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    """Partially update a todo. Omitted fields are left as they are."""
    todo = service.update(db, user.id, todo_id, body.changes())
    return TodoResponse.model_validate(todo)


@router.patch("/{todo_id}/toggle", response_model=TodoResponse)
def toggle_todo(
    todo_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: TodoService = Depends(get_todo_service),
) -> TodoResponse:
    """Flip a todo between pending and completed."""
    return TodoResponse.model_validate(service.toggle_status(db, user.id, todo_id))


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: TodoService = Depends(get_todo_service),
) -> Response:
    """Soft-delete a todo."""
    service.delete(db, user.id, todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
