"""Tasks router for task management."""

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from taskboard.core.auth.context import SessionContext
from taskboard.core.auth.dependencies import get_current_session, require_capability
from taskboard.core.auth.permissions import TASKS_CREATE
from taskboard.core.db.deps import get_db
from taskboard.core.exceptions import raise_not_found
from taskboard.models.task import TaskStatus
from taskboard.schemas.common import (
    ErrorResponse,
    PaginationMeta,
    StandardListResponse,
    StandardResponse,
)
from taskboard.schemas.task import (
    BulkDeleteRequest,
    GridState,
    TaskCreate,
    TaskFilters,
    TaskStats,
    TaskStatusUpdate,
    TaskUpdate,
    TaskView,
)
from taskboard.services.statistics_service import StatisticsService
from taskboard.services.task_service import TaskService

router = APIRouter()


def get_task_service(db: Annotated[Session, Depends(get_db)]) -> TaskService:
    """Dependency to get TaskService."""
    return TaskService(db)


def get_task_filters(
    search_term: str | None = Query(None, description="Text in title or description"),
    status: TaskStatus | None = Query(None, description="Filter by status"),
    owner_id: int | None = Query(None, description="Filter by owner"),
    start_date: date | None = Query(None, description="Created on or after"),
    end_date: date | None = Query(None, description="Created on or before (inclusive)"),
    include_completed: bool = Query(True, description="Include completed tasks"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    sort_by: str = Query("created_at", description="title, status, created_at or modified_at"),
    sort_descending: bool = Query(True, description="Sort descending"),
) -> TaskFilters:
    """Dependency building TaskFilters from query parameters."""
    return TaskFilters(
        search_term=search_term,
        status=status,
        owner_id=owner_id,
        start_date=start_date,
        end_date=end_date,
        include_completed=include_completed,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_descending=sort_descending,
    )


def _listing_response(data, filters: TaskFilters) -> StandardListResponse[TaskView]:
    meta = PaginationMeta.build(data.total_items, filters.page, filters.page_size)
    return StandardListResponse(data=data.tasks, meta=meta)


@router.get(
    "/mine",
    response_model=StandardListResponse[TaskView],
    status_code=status.HTTP_200_OK,
    summary="List my tasks",
    description="List the caller's own tasks with filters, sorting and 1-based paging.",
)
async def list_my_tasks(
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
    filters: Annotated[TaskFilters, Depends(get_task_filters)],
) -> StandardListResponse[TaskView]:
    """List the caller's tasks."""
    return _listing_response(service.get_tasks_for_user(filters, session.user_id), filters)


@router.get(
    "/all",
    response_model=StandardListResponse[TaskView],
    status_code=status.HTTP_200_OK,
    summary="List all tasks",
    description="List every user's tasks. Empty for roles without cross-user visibility.",
)
async def list_all_tasks(
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
    filters: Annotated[TaskFilters, Depends(get_task_filters)],
) -> StandardListResponse[TaskView]:
    """List all tasks."""
    return _listing_response(service.get_all_tasks(filters, session.user_id), filters)


@router.get(
    "/grid",
    response_model=StandardListResponse[TaskView],
    status_code=status.HTTP_200_OK,
    summary="Task grid page",
    description="Load a data-grid page of tasks. Pages are 0-based.",
)
async def load_task_grid(
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
    page: int = Query(0, ge=0, description="Page number (0-based)"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    sort_by: str | None = Query(None, description="title, status or created_at"),
    descending: bool = Query(False, description="Sort descending"),
    view_all: bool = Query(False, description="Every user's tasks"),
) -> StandardListResponse[TaskView]:
    """Load a task grid page."""
    state = GridState(page=page, page_size=page_size, sort_by=sort_by, descending=descending)
    grid = service.load_tasks_grid(state, session.user_id, view_all=view_all)
    return StandardListResponse(
        data=grid.items,
        meta=PaginationMeta.build(grid.total_items, page, page_size),
    )


@router.get(
    "/stats",
    response_model=StandardResponse[TaskStats],
    status_code=status.HTTP_200_OK,
    summary="Task statistics",
    description="Statistics over the caller's tasks, or every task with scope=all.",
)
async def get_task_stats(
    session: Annotated[SessionContext, Depends(get_current_session)],
    db: Annotated[Session, Depends(get_db)],
    scope: Literal["mine", "all"] = Query("mine", description="mine or all"),
) -> StandardResponse[TaskStats]:
    """Get task statistics."""
    statistics = StatisticsService(db)
    if scope == "all":
        stats = statistics.get_all_stats(session.user_id)
    else:
        stats = statistics.get_user_stats(session.user_id)
    return StandardResponse(data=stats)


@router.post(
    "",
    response_model=StandardResponse[TaskView],
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    description="Create a new task owned by the caller. Requires tasks.create.",
)
async def create_task(
    task_data: TaskCreate,
    session: Annotated[SessionContext, Depends(require_capability(TASKS_CREATE))],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> StandardResponse[TaskView]:
    """Create a new task."""
    task = service.create_task(
        title=task_data.title,
        owner_id=session.user_id,
        description=task_data.description,
        status=task_data.status,
    )
    return StandardResponse(data=TaskView.from_entity(task))


@router.post(
    "/bulk-delete",
    response_model=StandardResponse[dict],
    status_code=status.HTTP_200_OK,
    summary="Delete several tasks",
    description="Delete every listed task the caller may delete; the rest are skipped.",
)
async def bulk_delete_tasks(
    request: BulkDeleteRequest,
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> StandardResponse[dict]:
    """Delete several tasks."""
    deleted = service.delete_tasks(request.task_ids, session.user_id)
    return StandardResponse(data={"deleted": deleted})


@router.get(
    "/{task_id}",
    response_model=StandardResponse[TaskView],
    status_code=status.HTTP_200_OK,
    summary="Get task",
    description="Get a task by ID. 404 when absent or not visible to the caller.",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_task(
    task_id: Annotated[int, Path(description="Task ID")],
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> StandardResponse[TaskView]:
    """Get a specific task."""
    task = service.get_task(task_id, session.user_id)
    if task is None:
        raise_not_found("Task", task_id)
    return StandardResponse(data=TaskView.from_entity(task))


@router.put(
    "/{task_id}",
    response_model=StandardResponse[TaskView],
    status_code=status.HTTP_200_OK,
    summary="Update task",
    description="Replace title, description and status. 404 when absent or not editable.",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def update_task(
    task_id: Annotated[int, Path(description="Task ID")],
    task_data: TaskUpdate,
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> StandardResponse[TaskView]:
    """Update a task."""
    task = service.update_task(
        task_id,
        session.user_id,
        title=task_data.title,
        description=task_data.description,
        status=task_data.status,
    )
    if task is None:
        raise_not_found("Task", task_id)
    return StandardResponse(data=TaskView.from_entity(task))


@router.patch(
    "/{task_id}/status",
    response_model=StandardResponse[TaskView],
    status_code=status.HTTP_200_OK,
    summary="Update task status",
    description="Change only the status of a task.",
)
async def update_task_status(
    task_id: Annotated[int, Path(description="Task ID")],
    status_data: TaskStatusUpdate,
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> StandardResponse[TaskView]:
    """Update a task's status."""
    if not service.update_task_status(task_id, status_data.status, session.user_id):
        raise_not_found("Task", task_id)
    task = service.get_task(task_id, session.user_id)
    return StandardResponse(data=TaskView.from_entity(task))


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete task",
    description="Delete a task. 404 when absent or not deletable by the caller.",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_task(
    task_id: Annotated[int, Path(description="Task ID")],
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> None:
    """Delete a task."""
    if not service.delete_task(task_id, session.user_id):
        raise_not_found("Task", task_id)
