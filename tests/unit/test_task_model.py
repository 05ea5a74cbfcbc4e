"""Unit tests for the task model and status display helpers."""

from datetime import UTC, datetime, timedelta

from taskboard.models.task import (
    DEFAULT_STATUS_COLOR,
    TaskItem,
    TaskStatus,
    status_color,
    status_label,
)


class TestApplyStatus:
    """Tests for the completion timestamp kept by TaskItem.apply_status."""

    def test_entering_completed_stamps_completed_at(self):
        """Test that moving to Completed records the completion time."""
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        task = TaskItem(title="Write report", status=TaskStatus.IN_PROGRESS)

        task.apply_status(TaskStatus.COMPLETED, now=now)

        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at == now

    def test_leaving_completed_clears_completed_at(self):
        """Test that moving away from Completed clears the completion time."""
        task = TaskItem(title="Write report")
        task.apply_status(TaskStatus.COMPLETED)

        task.apply_status(TaskStatus.OPEN)

        assert task.completed_at is None

    def test_resaving_completed_keeps_original_stamp(self):
        """Test that a second Completed write does not move the stamp."""
        first = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        task = TaskItem(title="Write report")
        task.apply_status(TaskStatus.COMPLETED, now=first)

        task.apply_status(TaskStatus.COMPLETED, now=first + timedelta(days=2))

        assert task.completed_at == first

    def test_non_completed_statuses_never_have_stamp(self):
        """Test every non-completed status leaves completed_at empty."""
        task = TaskItem(title="Write report")
        for status in TaskStatus:
            if status == TaskStatus.COMPLETED:
                continue
            task.apply_status(TaskStatus.COMPLETED)
            task.apply_status(status)
            assert task.completed_at is None


class TestStatusDisplay:
    """Tests for status labels and colours."""

    def test_labels(self):
        """Test display labels differ from persisted values where needed."""
        assert TaskStatus.IN_PROGRESS.value == "InProgress"
        assert status_label(TaskStatus.IN_PROGRESS) == "In Progress"
        assert status_label(TaskStatus.ON_HOLD) == "On Hold"
        assert status_label(TaskStatus.CANCELLED) == "Cancelled"

    def test_colors(self):
        """Test every status has its own colour."""
        colors = {status_color(status) for status in TaskStatus}
        assert len(colors) == len(TaskStatus)
        assert DEFAULT_STATUS_COLOR not in colors
        assert status_color(TaskStatus.COMPLETED) == "#4CAF50"
