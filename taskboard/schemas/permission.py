"""Permission record schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from taskboard.core.auth.permissions import Role, role_label
from taskboard.models.user_permission import UserPermission
from taskboard.schemas.task import GridState


class PermissionRecord(BaseModel):
    """A permission record, persisted or pending.

    Pending additions have no ``id``; removals are matched by ``id``.
    """

    id: int | None = Field(None, description="Record ID (None for unsaved additions)")
    user_id: int = Field(..., description="User the role is granted to")
    role: Role = Field(..., description="Granted role")
    task_id: int | None = Field(None, description="Optional task scope")
    created_at: datetime | None = None
    user_display_name: str | None = None
    user_email: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[misc]
    @property
    def role_label(self) -> str:
        return role_label(self.role)

    @classmethod
    def from_entity(cls, permission: UserPermission) -> "PermissionRecord":
        """Build from a persisted record with its user loaded."""
        user = permission.user
        return cls(
            id=permission.id,
            user_id=permission.user_id,
            role=permission.role,
            task_id=permission.task_id,
            created_at=permission.created_at,
            user_display_name=user.display_name if user else None,
            user_email=user.email if user else None,
        )


class PermissionGridState(GridState):
    """Grid state for permission listings, with an optional role filter."""

    role: Role | None = Field(None, description="Only records with this role")


class PermissionQuery(BaseModel):
    """Permission listing request, carrying the caller's unsaved edits."""

    state: PermissionGridState = Field(default_factory=PermissionGridState)
    search: str = Field("", description="Text in the user's display name or email")
    local_additions: list[PermissionRecord] = Field(default_factory=list)
    local_removals: list[PermissionRecord] = Field(default_factory=list)


class PermissionSaveRequest(BaseModel):
    """Batch of pending additions and removals to apply atomically."""

    local_additions: list[PermissionRecord] = Field(default_factory=list)
    local_removals: list[PermissionRecord] = Field(default_factory=list)


class PermissionCapabilities(BaseModel):
    """The caller's permission-management capabilities."""

    role: Role
    role_label: str
    can_manage_permissions: bool
    can_edit_permissions: bool
    can_view_all_tasks: bool
