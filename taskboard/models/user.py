"""Application user model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from taskboard.core.auth.permissions import DEFAULT_ROLE, Role
from taskboard.core.db.session import Base


class AppUser(Base):
    """User known to the system, keyed by the identity provider's uid."""

    __tablename__ = "app_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String(128), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(255), nullable=False)

    # Mirrors the role of the user's permission record
    role = Column(
        Enum(
            Role,
            native_enum=False,
            create_constraint=False,
            length=50,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=DEFAULT_ROLE,
        nullable=False,
    )

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=True,
    )

    # Relationships
    permissions = relationship(
        "UserPermission",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    # Restricted at the database level: a user owning tasks cannot be deleted
    owned_tasks = relationship(
        "TaskItem",
        back_populates="owner",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return f"<AppUser(id={self.id}, email={self.email}, role={self.role})>"
