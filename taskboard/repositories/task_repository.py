"""Task repository: data access and query construction for tasks."""

from datetime import UTC, datetime, time, timedelta

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session, joinedload

from taskboard.models.task import TaskItem, TaskStatus
from taskboard.schemas.task import TaskFilters

# Normalized sort key -> column. Keys are lower-cased with underscores removed
# so "created_at", "CreatedAtUtc" and "createdat" all match.
SORT_COLUMNS = {
    "title": TaskItem.title,
    "status": TaskItem.status,
    "createdat": TaskItem.created_at,
    "createdatutc": TaskItem.created_at,
    "modifiedat": TaskItem.updated_at,
    "modifiedatutc": TaskItem.updated_at,
    "updatedat": TaskItem.updated_at,
}

# The data-grid listing only sorts on these
GRID_SORT_KEYS = {"title", "status", "createdat", "createdatutc"}


def normalize_sort_key(sort_by: str | None) -> str:
    """Lower-case a sort key and drop underscores."""
    return (sort_by or "").replace("_", "").lower()


class TaskRepository:
    """Repository for task data access."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    # CRUD
    def create(self, task: TaskItem) -> TaskItem:
        """Persist a new task."""
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def get_by_id(self, task_id: int) -> TaskItem | None:
        """Get task by ID, with its owner loaded."""
        return (
            self.db.query(TaskItem)
            .options(joinedload(TaskItem.owner))
            .filter(TaskItem.id == task_id)
            .first()
        )

    def get_by_ids(self, task_ids: list[int]) -> list[TaskItem]:
        """Get every task whose ID is in ``task_ids``."""
        if not task_ids:
            return []
        return self.db.query(TaskItem).filter(TaskItem.id.in_(task_ids)).all()

    def save(self, task: TaskItem) -> TaskItem:
        """Commit pending changes on a loaded task."""
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete(self, task: TaskItem) -> None:
        """Delete a task."""
        self.db.delete(task)
        self.db.commit()

    def delete_many(self, tasks: list[TaskItem]) -> int:
        """Delete several tasks in one commit."""
        for task in tasks:
            self.db.delete(task)
        self.db.commit()
        return len(tasks)

    def get_by_owner(self, owner_id: int) -> list[TaskItem]:
        """All tasks owned by a user."""
        return self.db.query(TaskItem).filter(TaskItem.owner_id == owner_id).all()

    def get_all_with_owner(self) -> list[TaskItem]:
        """Every task, with owners loaded."""
        return self.db.query(TaskItem).options(joinedload(TaskItem.owner)).all()

    def count_by_owner(self, owner_id: int, status: TaskStatus | None = None) -> int:
        """Count a user's tasks, optionally restricted to one status."""
        query = self.db.query(TaskItem).filter(TaskItem.owner_id == owner_id)
        if status is not None:
            query = query.filter(TaskItem.status == status)
        return query.count()

    # Query construction
    def query(self, owner_id: int | None = None) -> Query:
        """Base task query, optionally scoped to one owner."""
        query = self.db.query(TaskItem)
        if owner_id is not None:
            query = query.filter(TaskItem.owner_id == owner_id)
        return query

    @staticmethod
    def apply_filters(query: Query, filters: TaskFilters) -> Query:
        """Apply search, status, owner, date-range and completion filters.

        Args:
            query: Task query to narrow.
            filters: Filter specification.

        Returns:
            Query with filters applied.
        """
        if filters.search_term and filters.search_term.strip():
            term = filters.search_term.strip().lower()
            query = query.filter(
                or_(
                    func.lower(TaskItem.title).contains(term, autoescape=True),
                    func.lower(func.coalesce(TaskItem.description, "")).contains(
                        term, autoescape=True
                    ),
                )
            )

        if filters.status is not None:
            query = query.filter(TaskItem.status == filters.status)

        if filters.owner_id is not None:
            query = query.filter(TaskItem.owner_id == filters.owner_id)

        if filters.start_date is not None:
            start = datetime.combine(filters.start_date, time.min, tzinfo=UTC)
            query = query.filter(TaskItem.created_at >= start)

        if filters.end_date is not None:
            # Inclusive: everything before the start of the following day
            end = datetime.combine(filters.end_date + timedelta(days=1), time.min, tzinfo=UTC)
            query = query.filter(TaskItem.created_at < end)

        if not filters.include_completed:
            query = query.filter(TaskItem.status != TaskStatus.COMPLETED)

        return query

    @staticmethod
    def apply_sorting(
        query: Query,
        sort_by: str | None,
        descending: bool,
        allowed: set[str] | None = None,
    ) -> Query:
        """Order by a known field, defaulting to newest first.

        Unknown, missing or disallowed keys fall back to ``created_at``
        descending. Ties are broken by ID in the same direction so pages are
        stable.
        """
        key = normalize_sort_key(sort_by)
        column = SORT_COLUMNS.get(key)
        if column is None or (allowed is not None and key not in allowed):
            return query.order_by(TaskItem.created_at.desc(), TaskItem.id.desc())

        if descending:
            return query.order_by(column.desc(), TaskItem.id.desc())
        return query.order_by(column.asc(), TaskItem.id.asc())

    @staticmethod
    def fetch_page(query: Query, offset: int, limit: int) -> tuple[list[TaskItem], int]:
        """Count the query, then load one page with owners.

        Returns:
            Tuple of (tasks on the page, total matching tasks).
        """
        total = query.order_by(None).count()
        items = (
            query.options(joinedload(TaskItem.owner))
            .offset(max(offset, 0))
            .limit(limit)
            .all()
        )
        return items, total
