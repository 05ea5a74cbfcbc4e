"""Permission service: role resolution, task access checks and permission records."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.core.auth.permissions import (
    DEFAULT_ROLE,
    PERMISSIONS_EDIT,
    PERMISSIONS_MANAGE,
    TASKS_VIEW_ALL,
    Role,
    can_access_task,
    parse_role,
    role_allows,
    role_label,
)
from taskboard.core.exceptions import InvariantViolationError, SelfLockoutError
from taskboard.core.logging import log_access_denied, log_permission_change
from taskboard.models.user import AppUser
from taskboard.repositories.permission_repository import PermissionRepository
from taskboard.repositories.task_repository import TaskRepository
from taskboard.repositories.user_repository import UserRepository
from taskboard.schemas.common import GridPage
from taskboard.schemas.permission import (
    PermissionCapabilities,
    PermissionGridState,
    PermissionRecord,
)

logger = logging.getLogger(__name__)

USER_SEARCH_LIMIT = 10


class PermissionService:
    """Service answering authorization questions and managing permission records.

    Every check re-reads the caller's role from storage; nothing is cached
    between calls.
    """

    def __init__(self, db: Session):
        """Initialize permission service.

        Args:
            db: Database session
        """
        self.db = db
        self.repository = PermissionRepository(db)
        self.user_repository = UserRepository(db)
        self.task_repository = TaskRepository(db)

    def resolve_role(self, user_id: int) -> Role:
        """Get the user's current role.

        Unknown users resolve to the default role.
        """
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            return DEFAULT_ROLE
        return parse_role(user.role)

    def _can_access_task(self, task_id: int, user_id: int, action: str) -> bool:
        role = self.resolve_role(user_id)
        if role_allows(role, f"tasks.{action}_all"):
            return True

        task = self.task_repository.get_by_id(task_id)
        if task is None:
            return False
        return can_access_task(role, action, is_owner=task.owner_id == user_id)

    def can_view(self, task_id: int, user_id: int) -> bool:
        """Whether the user may view the task."""
        return self._can_access_task(task_id, user_id, "view")

    def can_edit(self, task_id: int, user_id: int) -> bool:
        """Whether the user may edit the task."""
        return self._can_access_task(task_id, user_id, "edit")

    def can_delete(self, task_id: int, user_id: int) -> bool:
        """Whether the user may delete the task."""
        return self._can_access_task(task_id, user_id, "delete")

    def can_manage_permissions(self, user_id: int) -> bool:
        """Whether the user may open permission management (view records)."""
        return role_allows(self.resolve_role(user_id), PERMISSIONS_MANAGE)

    def can_edit_permissions(self, user_id: int) -> bool:
        """Whether the user may change permission records."""
        return role_allows(self.resolve_role(user_id), PERMISSIONS_EDIT)

    def can_view_all_tasks(self, user_id: int) -> bool:
        """Whether the user may list every user's tasks."""
        return role_allows(self.resolve_role(user_id), TASKS_VIEW_ALL)

    def get_capabilities(self, user_id: int) -> PermissionCapabilities:
        """Summarize the user's permission-related capabilities."""
        role = self.resolve_role(user_id)
        return PermissionCapabilities(
            role=role,
            role_label=role_label(role),
            can_manage_permissions=role_allows(role, PERMISSIONS_MANAGE),
            can_edit_permissions=role_allows(role, PERMISSIONS_EDIT),
            can_view_all_tasks=role_allows(role, TASKS_VIEW_ALL),
        )

    def load_user_permissions(
        self,
        state: PermissionGridState,
        user_id: int,
        search: str = "",
        local_additions: list[PermissionRecord] | None = None,
        local_removals: list[PermissionRecord] | None = None,
    ) -> GridPage[PermissionRecord]:
        """Load one page of permission records, merged with unsaved edits.

        Super admins see every record, everyone else only their own. When the
        caller may edit permissions, pending additions are appended to the
        page and pending removals (matched by record ID) are taken out; the
        total is adjusted by the size of both lists. Other callers get the
        persisted page unchanged.

        Args:
            state: Grid state (0-based page, page size, optional role filter)
            user_id: Calling user
            search: Text in the record owner's display name or email
            local_additions: Unsaved additions (no ID yet)
            local_removals: Unsaved removals

        Returns:
            GridPage of permission records
        """
        role = self.resolve_role(user_id)
        scope_user_id = None if role == Role.SUPER_ADMIN else user_id

        query = self.repository.query(scope_user_id=scope_user_id, search=search)
        query = self.repository.apply_role_filter(query, state.role)
        permissions, total = self.repository.fetch_page(
            query, offset=state.page * state.page_size, limit=state.page_size
        )
        items = [PermissionRecord.from_entity(permission) for permission in permissions]

        if not role_allows(role, PERMISSIONS_EDIT):
            return GridPage(items=items, total_items=total)

        additions = local_additions or []
        removals = local_removals or []
        removed_ids = {record.id for record in removals if record.id is not None}

        merged = [
            record
            for record in items + list(additions)
            if record.id is None or record.id not in removed_ids
        ]
        total = max(total + len(additions) - len(removals), 0)
        return GridPage(items=merged, total_items=total)

    def save_changes(
        self,
        local_additions: list[PermissionRecord],
        local_removals: list[PermissionRecord],
        user_id: int,
    ) -> bool:
        """Apply pending additions and removals in one transaction.

        An addition replaces the role (and task scope) of the target user's
        existing record, or creates one. A removal deletes a record by ID; a
        user left with no record falls back to the default role.

        Args:
            local_additions: Records to add or update
            local_removals: Records to delete (by ID)
            user_id: Calling user

        Returns:
            False if the caller may not edit permissions, True once committed

        Raises:
            SelfLockoutError: If an addition or removal targets the caller's own
                record. Nothing from the batch is written.
            InvariantViolationError: If an addition targets an unknown user.
            SQLAlchemyError: On storage failure, after rolling back.
        """
        if not self.can_edit_permissions(user_id):
            log_access_denied(user_id, "permissions.save")
            return False

        changes: list[tuple[str, int, dict]] = []
        try:
            for addition in local_additions:
                changes.append(self._apply_addition(addition, user_id))

            for removal in local_removals:
                change = self._apply_removal(removal, user_id)
                if change is not None:
                    changes.append(change)

            self.db.commit()
        except InvariantViolationError as e:
            self.db.rollback()
            logger.warning(f"Permission batch from user {user_id} rejected: {e}")
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving permission batch from user {user_id}: {e}", exc_info=True)
            raise

        for action, target_user_id, details in changes:
            log_permission_change(user_id, action, target_user_id=target_user_id, details=details)
        return True

    def assign_role(self, target_user_id: int, role: Role) -> None:
        """Set a user's role without an acting user (operator tooling).

        Raises:
            InvariantViolationError: If the user does not exist.
        """
        try:
            action, _, details = self._apply_addition(
                PermissionRecord(user_id=target_user_id, role=role)
            )
            self.db.commit()
        except (InvariantViolationError, SQLAlchemyError):
            self.db.rollback()
            raise
        logger.warning(f"Role of user {target_user_id} set to {role.value} by operator")
        log_permission_change(0, action, target_user_id=target_user_id, details=details)

    def _apply_addition(
        self, addition: PermissionRecord, user_id: int | None = None
    ) -> tuple[str, int, dict]:
        if user_id is not None and addition.user_id == user_id:
            raise SelfLockoutError(user_id, addition.id, action="alter")

        user = self.user_repository.get_by_id(addition.user_id)
        if user is None:
            raise InvariantViolationError(f"User {addition.user_id} does not exist")

        existing = self.repository.get_first_for_user(addition.user_id)
        if existing is not None:
            existing.role = addition.role
            existing.task_id = addition.task_id
            self.db.flush()
            action = "update"
        else:
            self.repository.add(addition.user_id, addition.role, addition.task_id)
            action = "grant"

        user.role = addition.role
        return action, addition.user_id, {"role": addition.role.value}

    def _apply_removal(
        self, removal: PermissionRecord, user_id: int
    ) -> tuple[str, int, dict] | None:
        if removal.id is None:
            return None

        permission = self.repository.get_by_id(removal.id)
        if permission is None:
            return None

        if permission.user_id == user_id:
            raise SelfLockoutError(user_id, permission.id)

        target_user_id = permission.user_id
        self.repository.delete(permission)

        remaining = self.repository.get_first_for_user(target_user_id)
        target = self.user_repository.get_by_id(target_user_id)
        if target is not None:
            target.role = remaining.role if remaining is not None else DEFAULT_ROLE

        return "revoke", target_user_id, {"permission_id": removal.id}

    def get_available_users(self) -> list[AppUser]:
        """All users ordered by display name."""
        return self.user_repository.get_all()

    def search_users(self, text: str, limit: int = USER_SEARCH_LIMIT) -> list[AppUser]:
        """Users whose display name or email contains ``text``."""
        return self.user_repository.search(text, limit=limit)
