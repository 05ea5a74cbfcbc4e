"""Per-request session context."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from taskboard.core.auth.permissions import Role, parse_role, role_label
from taskboard.models.user import AppUser


@dataclass
class SessionContext:
    """The authenticated caller of one request.

    Built once per request from the verified identity and passed explicitly to
    whatever needs it. ``refresh`` re-reads the user after a profile or role
    change.
    """

    user_id: int
    email: str
    display_name: str
    role: Role

    @classmethod
    def from_user(cls, user: AppUser) -> "SessionContext":
        return cls(
            user_id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=parse_role(user.role),
        )

    @property
    def role_label(self) -> str:
        return role_label(self.role)

    def refresh(self, db: Session) -> "SessionContext":
        """Reload display name, email and role from storage."""
        user = db.get(AppUser, self.user_id)
        if user is not None:
            db.refresh(user)
            self.email = user.email
            self.display_name = user.display_name
            self.role = parse_role(user.role)
        return self
