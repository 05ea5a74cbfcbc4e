"""Unit tests for UserService."""

import pytest

from taskboard.core.exceptions import ProfileValidationError
from taskboard.models.task import TaskStatus
from taskboard.services.user_service import UserService


class TestUserService:
    """Test suite for UserService."""

    def test_lookups(self, db_session, standard_user):
        """Test lookups by id and email."""
        service = UserService(db_session)

        assert service.get_user_by_id(standard_user.id).id == standard_user.id
        assert service.get_user_by_email(standard_user.email).id == standard_user.id
        assert service.get_user_by_id(777) is None
        assert service.get_user_by_email("nobody@example.com") is None

    def test_search_users_capped_at_fifty(self, db_session, make_user):
        """Test directory search returns at most 50 users."""
        for i in range(55):
            make_user(display_name=f"Staff {i:02d}")

        found = UserService(db_session).search_users("staff")

        assert len(found) == 50
        assert found[0].display_name == "Staff 00"

    def test_get_all_users(self, db_session, make_user):
        """Test all users are listed by display name."""
        make_user(display_name="Bea")
        make_user(display_name="Abe")

        assert [u.display_name for u in UserService(db_session).get_all_users()] == ["Abe", "Bea"]

    def test_update_display_name(self, db_session, standard_user):
        """Test the display name is trimmed and saved."""
        user = UserService(db_session).update_display_name(standard_user.id, "  Stanley  ")

        assert user.display_name == "Stanley"

    def test_update_display_name_missing_user(self, db_session):
        """Test updating an unknown user returns None."""
        assert UserService(db_session).update_display_name(555, "Ghost") is None

    def test_update_display_name_rejects_blank(self, db_session, standard_user):
        """Test a blank name is a validation error."""
        with pytest.raises(ProfileValidationError) as exc_info:
            UserService(db_session).update_display_name(standard_user.id, "   ")
        assert exc_info.value.field == "display_name"

    def test_task_counts(self, db_session, standard_user, other_user, make_task):
        """Test total and completed task counters."""
        make_task(standard_user)
        make_task(standard_user, status=TaskStatus.COMPLETED)
        make_task(other_user, status=TaskStatus.COMPLETED)
        service = UserService(db_session)

        assert service.get_user_task_count(standard_user.id) == 2
        assert service.get_completed_task_count(standard_user.id) == 1
