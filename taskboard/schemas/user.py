"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskboard.core.auth.permissions import Role, role_label
from taskboard.models.user import AppUser


class UserResponse(BaseModel):
    """User as returned by the API."""

    id: int
    email: str
    display_name: str
    role: Role
    role_label: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, user: AppUser) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            role_label=role_label(user.role),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ProfileUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    display_name: str = Field(..., description="New display name", min_length=1, max_length=255)


class ProfileResponse(UserResponse):
    """User with task counters."""

    task_count: int = 0
    completed_task_count: int = 0
