"""Task model and task status enumeration."""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship

from taskboard.core.db.session import Base

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 4000


class TaskStatus(str, Enum):
    """Task status enumeration. The value is the persisted representation."""

    OPEN = "Open"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    ON_HOLD = "OnHold"
    CANCELLED = "Cancelled"


STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.OPEN: "Open",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.ON_HOLD: "On Hold",
    TaskStatus.CANCELLED: "Cancelled",
}

STATUS_COLORS: dict[TaskStatus, str] = {
    TaskStatus.OPEN: "#2196F3",  # Blue
    TaskStatus.IN_PROGRESS: "#FF9800",  # Orange
    TaskStatus.COMPLETED: "#4CAF50",  # Green
    TaskStatus.ON_HOLD: "#9E9E9E",  # Gray
    TaskStatus.CANCELLED: "#F44336",  # Red
}
DEFAULT_STATUS_COLOR = "#757575"


def status_label(status: TaskStatus) -> str:
    """Human-readable label for a status."""
    return STATUS_LABELS.get(status, str(status))


def status_color(status: TaskStatus) -> str:
    """Display colour for a status."""
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


class TaskItem(Base):
    """Task owned by exactly one user."""

    __tablename__ = "task_items"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Task information
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SAEnum(
            TaskStatus,
            native_enum=False,
            create_constraint=False,
            length=50,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=TaskStatus.OPEN,
        index=True,
    )

    # Ownership is fixed at creation
    owner_id = Column(
        Integer,
        ForeignKey("app_users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )
    updated_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    owner = relationship("AppUser", back_populates="owned_tasks")
    permissions = relationship(
        "UserPermission",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("idx_task_items_owner_status", "owner_id", "status"),)

    def apply_status(self, status: TaskStatus, now: datetime | None = None) -> None:
        """Set the status and keep ``completed_at`` in step with it.

        ``completed_at`` is stamped when the task enters Completed and cleared
        when it leaves; re-saving a Completed task keeps the original stamp.
        """
        now = now or datetime.now(UTC)
        self.status = status
        if status == TaskStatus.COMPLETED:
            if self.completed_at is None:
                self.completed_at = now
        else:
            self.completed_at = None

    def __repr__(self) -> str:
        return f"<TaskItem(id={self.id}, title={self.title}, status={self.status})>"
