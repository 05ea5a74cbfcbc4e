"""UserPermission model: a role grant for a user."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import relationship

from taskboard.core.auth.permissions import Role
from taskboard.core.db.session import Base


class UserPermission(Base):
    """Role grant for a user, optionally scoped to a task.

    The task scope is stored but no authorization rule reads it.
    """

    __tablename__ = "user_permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("app_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(
        Enum(
            Role,
            native_enum=False,
            create_constraint=False,
            length=50,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
    )
    task_id = Column(
        Integer,
        ForeignKey("task_items.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    user = relationship("AppUser", back_populates="permissions")
    task = relationship("TaskItem", back_populates="permissions")

    def __repr__(self) -> str:
        return f"<UserPermission(id={self.id}, user_id={self.user_id}, role={self.role})>"
