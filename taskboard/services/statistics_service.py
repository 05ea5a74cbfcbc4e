"""Task statistics.

The aggregator trusts its input: callers pass task collections that are
already scoped to what the requesting user may see.
"""

from collections import Counter
from collections.abc import Iterable

from sqlalchemy.orm import Session

from taskboard.models.task import STATUS_LABELS, TaskItem, TaskStatus
from taskboard.repositories.task_repository import TaskRepository
from taskboard.schemas.task import TaskStats
from taskboard.services.permission_service import PermissionService

UNKNOWN_OWNER = "Unknown"


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed tasks, rounded to two decimals (0 for no tasks)."""
    if total == 0:
        return 0.0
    return round(completed / total * 100, 2)


def calculate_stats(tasks: Iterable[TaskItem]) -> TaskStats:
    """Count tasks per status and compute the completion rate.

    Examples:
        Three tasks with one Completed give a completion rate of 33.33.
    """
    counts = Counter(task.status for task in tasks)
    total = sum(counts.values())

    return TaskStats(
        total_tasks=total,
        open_tasks=counts[TaskStatus.OPEN],
        in_progress_tasks=counts[TaskStatus.IN_PROGRESS],
        completed_tasks=counts[TaskStatus.COMPLETED],
        on_hold_tasks=counts[TaskStatus.ON_HOLD],
        cancelled_tasks=counts[TaskStatus.CANCELLED],
        completion_rate=completion_rate(counts[TaskStatus.COMPLETED], total),
        tasks_by_status={STATUS_LABELS[status]: counts[status] for status in TaskStatus},
    )


def calculate_all_stats(tasks: Iterable[TaskItem]) -> TaskStats:
    """Like :func:`calculate_stats`, plus task counts per owner display name."""
    tasks = list(tasks)
    stats = calculate_stats(tasks)
    stats.tasks_by_owner = dict(
        Counter(task.owner.display_name if task.owner else UNKNOWN_OWNER for task in tasks)
    )
    return stats


class StatisticsService:
    """Loads scoped task collections and aggregates them."""

    def __init__(self, db: Session, permissions: PermissionService | None = None):
        self.db = db
        self.repository = TaskRepository(db)
        self.permissions = permissions or PermissionService(db)

    def get_user_stats(self, user_id: int) -> TaskStats:
        """Statistics over the user's own tasks."""
        return calculate_stats(self.repository.get_by_owner(user_id))

    def get_all_stats(self, user_id: int) -> TaskStats:
        """Statistics over every task; empty for users who cannot list all tasks."""
        if not self.permissions.can_view_all_tasks(user_id):
            return TaskStats()
        return calculate_all_stats(self.repository.get_all_with_owner())
