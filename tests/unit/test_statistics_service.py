"""Unit tests for task statistics."""

from taskboard.models.task import TaskItem, TaskStatus
from taskboard.models.user import AppUser
from taskboard.services.statistics_service import (
    StatisticsService,
    calculate_all_stats,
    calculate_stats,
    completion_rate,
)


def _task(status: TaskStatus, owner: AppUser | None = None) -> TaskItem:
    task = TaskItem(title="t", status=status)
    task.owner = owner
    return task


class TestCalculateStats:
    """Tests for the pure aggregation functions."""

    def test_empty_collection(self):
        """Test zero tasks give a zero completion rate."""
        stats = calculate_stats([])

        assert stats.total_tasks == 0
        assert stats.completion_rate == 0
        assert stats.tasks_by_status == {
            "Open": 0,
            "In Progress": 0,
            "Completed": 0,
            "On Hold": 0,
            "Cancelled": 0,
        }

    def test_one_of_three_completed(self):
        """Test the completion rate is rounded to two decimals."""
        stats = calculate_stats(
            [_task(TaskStatus.OPEN), _task(TaskStatus.IN_PROGRESS), _task(TaskStatus.COMPLETED)]
        )

        assert stats.total_tasks == 3
        assert stats.open_tasks == 1
        assert stats.in_progress_tasks == 1
        assert stats.completed_tasks == 1
        assert stats.completion_rate == 33.33
        assert stats.tasks_by_status["Cancelled"] == 0
        assert len(stats.tasks_by_status) == 5

    def test_counts_all_five_statuses(self):
        """Test every status has its own counter and display label."""
        stats = calculate_stats([_task(status) for status in TaskStatus] + [_task(TaskStatus.ON_HOLD)])

        assert stats.on_hold_tasks == 2
        assert stats.cancelled_tasks == 1
        assert stats.tasks_by_status["On Hold"] == 2
        assert stats.tasks_by_status["In Progress"] == 1
        assert stats.completion_rate == round(1 / 6 * 100, 2)

    def test_completion_rate(self):
        """Test the completion rate helper."""
        assert completion_rate(0, 0) == 0.0
        assert completion_rate(2, 2) == 100.0
        assert completion_rate(2, 3) == 66.67

    def test_tasks_by_owner(self):
        """Test the cross-user variant groups by owner display name."""
        ann = AppUser(display_name="Ann")
        bob = AppUser(display_name="Bob")
        stats = calculate_all_stats(
            [_task(TaskStatus.OPEN, ann), _task(TaskStatus.OPEN, ann), _task(TaskStatus.OPEN, bob)]
        )

        assert stats.tasks_by_owner == {"Ann": 2, "Bob": 1}

    def test_owner_stats_not_filled_by_plain_variant(self):
        """Test calculate_stats leaves tasks_by_owner empty."""
        assert calculate_stats([_task(TaskStatus.OPEN, AppUser(display_name="Ann"))]).tasks_by_owner == {}


class TestStatisticsService:
    """Tests for the scoped statistics loaders."""

    def test_user_stats_cover_only_own_tasks(self, db_session, standard_user, other_user, make_task):
        """Test get_user_stats ignores other users' tasks."""
        make_task(standard_user, status=TaskStatus.COMPLETED)
        make_task(other_user)

        stats = StatisticsService(db_session).get_user_stats(standard_user.id)

        assert stats.total_tasks == 1
        assert stats.completion_rate == 100.0

    def test_all_stats_empty_without_visibility(self, db_session, standard_user, make_task):
        """Test get_all_stats is empty for roles that cannot list all tasks."""
        make_task(standard_user)

        assert StatisticsService(db_session).get_all_stats(standard_user.id).total_tasks == 0

    def test_all_stats_for_super_admin(self, db_session, super_admin, standard_user, make_task):
        """Test get_all_stats spans every owner for SuperAdmin."""
        make_task(standard_user)
        make_task(super_admin)

        stats = StatisticsService(db_session).get_all_stats(super_admin.id)

        assert stats.total_tasks == 2
        assert stats.tasks_by_owner == {"Stan Standard": 1, "Sam Super": 1}
