"""Task schemas for API requests, responses and listing specifications."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from taskboard.models.task import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TaskItem,
    TaskStatus,
    status_color,
    status_label,
)


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(..., description="Task title", max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(
        None, description="Task description", max_length=DESCRIPTION_MAX_LENGTH
    )
    status: TaskStatus = Field(default=TaskStatus.OPEN, description="Task status")


class TaskUpdate(BaseModel):
    """Schema for a full task update (title, description and status)."""

    title: str = Field(..., description="Task title", max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(
        None, description="Task description", max_length=DESCRIPTION_MAX_LENGTH
    )
    status: TaskStatus = Field(..., description="Task status")


class TaskStatusUpdate(BaseModel):
    """Schema for a status-only update."""

    status: TaskStatus = Field(..., description="New task status")


class BulkDeleteRequest(BaseModel):
    """Schema for deleting several tasks at once."""

    task_ids: list[int] = Field(..., description="IDs of the tasks to delete", min_length=1)


class TaskView(BaseModel):
    """Task as presented to callers, with owner and display fields."""

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    status_label: str
    status_color: str
    owner_id: int
    owner_name: str = ""
    owner_email: str = ""
    created_at: datetime
    updated_at: datetime | None = None
    completed_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, task: TaskItem) -> "TaskView":
        """Build the view from a task with its owner loaded."""
        owner = task.owner
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            status_label=status_label(task.status),
            status_color=status_color(task.status),
            owner_id=task.owner_id,
            owner_name=owner.display_name if owner else "",
            owner_email=owner.email if owner else "",
            created_at=task.created_at,
            updated_at=task.updated_at,
            completed_at=task.completed_at,
        )


class TaskFilters(BaseModel):
    """Filter, sort and page specification for task listings.

    ``page`` is 1-based.
    """

    search_term: str | None = Field(None, description="Case-insensitive text in title or description")
    status: TaskStatus | None = Field(None, description="Exact status")
    owner_id: int | None = Field(None, description="Owner user ID")
    start_date: date | None = Field(None, description="Created on or after this day")
    end_date: date | None = Field(None, description="Created on or before this day (inclusive)")
    include_completed: bool = Field(True, description="Include Completed tasks")
    page: int = Field(1, ge=1, description="Page number (1-based)")
    page_size: int = Field(20, ge=1, le=100, description="Page size")
    sort_by: str = Field("created_at", description="title, status, created_at or modified_at")
    sort_descending: bool = Field(True, description="Sort descending")


class GridState(BaseModel):
    """Page and sort state of a data grid.

    ``page`` is 0-based.
    """

    page: int = Field(0, ge=0, description="Page number (0-based)")
    page_size: int = Field(20, ge=1, le=100, description="Page size")
    sort_by: str | None = Field(None, description="title, status or created_at")
    descending: bool = Field(False, description="Sort descending")


class TaskStats(BaseModel):
    """Task counts and completion rate."""

    total_tasks: int = 0
    open_tasks: int = 0
    in_progress_tasks: int = 0
    completed_tasks: int = 0
    on_hold_tasks: int = 0
    cancelled_tasks: int = 0
    completion_rate: float = 0.0
    tasks_by_owner: dict[str, int] = Field(default_factory=dict)
    tasks_by_status: dict[str, int] = Field(default_factory=dict)


class TaskGridData(BaseModel):
    """Task page, total and statistics."""

    tasks: list[TaskView] = Field(default_factory=list)
    total_items: int = 0
    stats: TaskStats | None = None
