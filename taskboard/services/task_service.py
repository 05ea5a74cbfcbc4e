"""Task service for task lifecycle and task listings."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.core.auth.permissions import can_access_task
from taskboard.core.exceptions import TaskValidationError
from taskboard.core.logging import log_access_denied
from taskboard.models.task import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TaskItem,
    TaskStatus,
)
from taskboard.repositories.task_repository import GRID_SORT_KEYS, TaskRepository
from taskboard.schemas.common import GridPage
from taskboard.schemas.task import GridState, TaskFilters, TaskGridData, TaskStats, TaskView
from taskboard.services.permission_service import PermissionService
from taskboard.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)


def validate_task_fields(title: str | None, description: str | None) -> tuple[str, str | None]:
    """Trim and validate title and description.

    Returns:
        Tuple of (title, description); a blank description becomes None.

    Raises:
        TaskValidationError: If the title is missing or a field is too long.
    """
    title = (title or "").strip()
    if not title:
        raise TaskValidationError("title", "Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise TaskValidationError(
            "title", f"Title cannot exceed {TITLE_MAX_LENGTH} characters"
        )

    description = (description or "").strip() or None
    if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
        raise TaskValidationError(
            "description",
            f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
        )
    return title, description


class TaskService:
    """Service for task management.

    Mutating operations return ``None``/``False`` both when the task does not
    exist and when the caller may not touch it. ``create_task`` does not check
    the caller's role; the API layer gates it.
    """

    def __init__(self, db: Session, permissions: PermissionService | None = None):
        """Initialize task service.

        Args:
            db: Database session
            permissions: PermissionService instance (created if not provided)
        """
        self.db = db
        self.repository = TaskRepository(db)
        self.permissions = permissions or PermissionService(db)
        self.statistics = StatisticsService(db, permissions=self.permissions)

    def _allowed(self, task: TaskItem, user_id: int, action: str) -> bool:
        role = self.permissions.resolve_role(user_id)
        if can_access_task(role, action, is_owner=task.owner_id == user_id):
            return True
        log_access_denied(user_id, f"tasks.{action}", resource_id=task.id)
        return False

    def _commit_failed(self, action: str, error: SQLAlchemyError) -> None:
        self.db.rollback()
        logger.error(f"Error during task {action}: {error}", exc_info=True)

    def get_task(self, task_id: int, user_id: int) -> TaskItem | None:
        """Get a task if it exists and the user may view it."""
        task = self.repository.get_by_id(task_id)
        if task is None or not self._allowed(task, user_id, "view"):
            return None
        return task

    def create_task(
        self,
        title: str,
        owner_id: int,
        description: str | None = None,
        status: TaskStatus = TaskStatus.OPEN,
    ) -> TaskItem:
        """Create a new task owned by ``owner_id``.

        Args:
            title: Task title (trimmed, required)
            owner_id: Owning user ID
            description: Task description (optional, trimmed)
            status: Initial status (default: OPEN)

        Returns:
            Created TaskItem

        Raises:
            TaskValidationError: If title or description is invalid.
        """
        title, description = validate_task_fields(title, description)

        now = datetime.now(UTC)
        task = TaskItem(
            title=title,
            description=description,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        task.apply_status(status, now=now)

        try:
            task = self.repository.create(task)
        except SQLAlchemyError as e:
            self._commit_failed("create", e)
            raise

        logger.info(f"Task {task.id} created by user {owner_id}")
        return task

    def update_task(
        self,
        task_id: int,
        user_id: int,
        title: str,
        description: str | None,
        status: TaskStatus,
    ) -> TaskItem | None:
        """Replace a task's title, description and status.

        Returns:
            Updated TaskItem, or None if absent or not editable

        Raises:
            TaskValidationError: If title or description is invalid.
        """
        title, description = validate_task_fields(title, description)

        task = self.repository.get_by_id(task_id)
        if task is None or not self._allowed(task, user_id, "edit"):
            return None

        now = datetime.now(UTC)
        task.title = title
        task.description = description
        task.updated_at = now
        task.apply_status(status, now=now)

        try:
            task = self.repository.save(task)
        except SQLAlchemyError as e:
            self._commit_failed("update", e)
            raise

        logger.info(f"Task {task_id} updated by user {user_id}")
        return task

    def update_task_status(self, task_id: int, status: TaskStatus, user_id: int) -> bool:
        """Change only the status of a task.

        Returns:
            True if updated, False if absent or not editable
        """
        task = self.repository.get_by_id(task_id)
        if task is None or not self._allowed(task, user_id, "edit"):
            return False

        now = datetime.now(UTC)
        task.updated_at = now
        task.apply_status(status, now=now)

        try:
            self.repository.save(task)
        except SQLAlchemyError as e:
            self._commit_failed("status update", e)
            raise

        logger.info(f"Task {task_id} status set to {status.value} by user {user_id}")
        return True

    def delete_task(self, task_id: int, user_id: int) -> bool:
        """Delete a task.

        Returns:
            True if deleted, False if absent or not deletable
        """
        task = self.repository.get_by_id(task_id)
        if task is None or not self._allowed(task, user_id, "delete"):
            return False

        try:
            self.repository.delete(task)
        except SQLAlchemyError as e:
            self._commit_failed("delete", e)
            raise

        logger.info(f"Task {task_id} deleted by user {user_id}")
        return True

    def delete_tasks(self, task_ids: list[int], user_id: int) -> bool:
        """Delete every listed task the user may delete; skip the rest.

        Returns:
            True if at least one task was deleted
        """
        role = self.permissions.resolve_role(user_id)
        tasks = self.repository.get_by_ids(list(dict.fromkeys(task_ids)))
        deletable = [
            task
            for task in tasks
            if can_access_task(role, "delete", is_owner=task.owner_id == user_id)
        ]

        skipped = len(set(task_ids)) - len(deletable)
        if skipped:
            logger.warning(f"Bulk delete by user {user_id} skipped {skipped} task(s)")
        if not deletable:
            return False

        try:
            deleted = self.repository.delete_many(deletable)
        except SQLAlchemyError as e:
            self._commit_failed("bulk delete", e)
            raise

        logger.info(f"{deleted} task(s) deleted by user {user_id}")
        return True

    def get_tasks_for_user(self, filters: TaskFilters, user_id: int) -> TaskGridData:
        """Page through the user's own tasks, with statistics over all of them.

        ``filters.page`` is 1-based.
        """
        query = self.repository.query(owner_id=user_id)
        tasks, total = self._filtered_page(query, filters)
        return TaskGridData(
            tasks=[TaskView.from_entity(task) for task in tasks],
            total_items=total,
            stats=self.statistics.get_user_stats(user_id),
        )

    def get_all_tasks(self, filters: TaskFilters, user_id: int) -> TaskGridData:
        """Page through every user's tasks.

        Users who cannot view all tasks get an empty result, not an error.
        """
        if not self.permissions.can_view_all_tasks(user_id):
            log_access_denied(user_id, "tasks.view_all")
            return TaskGridData(tasks=[], total_items=0, stats=TaskStats())

        tasks, total = self._filtered_page(self.repository.query(), filters)
        return TaskGridData(
            tasks=[TaskView.from_entity(task) for task in tasks],
            total_items=total,
            stats=self.statistics.get_all_stats(user_id),
        )

    def _filtered_page(self, query, filters: TaskFilters) -> tuple[list[TaskItem], int]:
        query = self.repository.apply_filters(query, filters)
        query = self.repository.apply_sorting(query, filters.sort_by, filters.sort_descending)
        offset = (filters.page - 1) * filters.page_size
        return self.repository.fetch_page(query, offset=offset, limit=filters.page_size)

    def load_tasks_grid(
        self, state: GridState, user_id: int, view_all: bool = False
    ) -> GridPage[TaskView]:
        """Load one data-grid page of tasks (0-based ``state.page``).

        With ``view_all`` the page spans every user's tasks, provided the user
        may view them; otherwise the result is empty.
        """
        if view_all:
            if not self.permissions.can_view_all_tasks(user_id):
                log_access_denied(user_id, "tasks.view_all")
                return GridPage(items=[], total_items=0)
            query = self.repository.query()
        else:
            query = self.repository.query(owner_id=user_id)

        query = self.repository.apply_sorting(
            query, state.sort_by, state.descending, allowed=GRID_SORT_KEYS
        )
        tasks, total = self.repository.fetch_page(
            query, offset=state.page * state.page_size, limit=state.page_size
        )
        return GridPage(items=[TaskView.from_entity(task) for task in tasks], total_items=total)
