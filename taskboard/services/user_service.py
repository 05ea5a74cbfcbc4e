"""User service: directory lookups, search and profile updates."""

import logging

from sqlalchemy.orm import Session

from taskboard.core.exceptions import ProfileValidationError
from taskboard.models.task import TaskStatus
from taskboard.models.user import AppUser
from taskboard.repositories.task_repository import TaskRepository
from taskboard.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

DIRECTORY_SEARCH_LIMIT = 50
DISPLAY_NAME_MAX_LENGTH = 255


class UserService:
    """Service for the user directory and profiles."""

    def __init__(self, db: Session):
        """Initialize service with database session."""
        self.repository = UserRepository(db)
        self.task_repository = TaskRepository(db)

    def get_user_by_id(self, user_id: int) -> AppUser | None:
        """Get a user by ID."""
        return self.repository.get_by_id(user_id)

    def get_user_by_email(self, email: str) -> AppUser | None:
        """Get a user by email."""
        return self.repository.get_by_email(email)

    def get_all_users(self) -> list[AppUser]:
        """All users ordered by display name."""
        return self.repository.get_all()

    def search_users(self, term: str) -> list[AppUser]:
        """Users matching ``term`` in display name or email, at most 50."""
        return self.repository.search(term, limit=DIRECTORY_SEARCH_LIMIT)

    def update_display_name(self, user_id: int, display_name: str) -> AppUser | None:
        """
        Change a user's display name.

        Returns:
            Updated user, or None if the user does not exist.

        Raises:
            ProfileValidationError: If the name is blank or too long.
        """
        display_name = (display_name or "").strip()
        if not display_name:
            raise ProfileValidationError("display_name", "Display name is required")
        if len(display_name) > DISPLAY_NAME_MAX_LENGTH:
            raise ProfileValidationError(
                "display_name",
                f"Display name cannot exceed {DISPLAY_NAME_MAX_LENGTH} characters",
            )

        user = self.repository.get_by_id(user_id)
        if user is None:
            return None

        user.display_name = display_name
        user = self.repository.save(user)
        logger.info(f"User {user_id} changed display name")
        return user

    def get_user_task_count(self, user_id: int) -> int:
        """Number of tasks the user owns."""
        return self.task_repository.count_by_owner(user_id)

    def get_completed_task_count(self, user_id: int) -> int:
        """Number of Completed tasks the user owns."""
        return self.task_repository.count_by_owner(user_id, status=TaskStatus.COMPLETED)
