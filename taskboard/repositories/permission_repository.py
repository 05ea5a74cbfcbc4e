"""Permission repository for permission record data access."""

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session, joinedload

from taskboard.core.auth.permissions import Role
from taskboard.models.user import AppUser
from taskboard.models.user_permission import UserPermission


class PermissionRepository:
    """Repository for permission record data access.

    Write methods only flush; the caller owns the transaction so that a batch
    of changes commits or rolls back as one.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def get_by_id(self, permission_id: int) -> UserPermission | None:
        """Get a permission record by ID."""
        return (
            self.db.query(UserPermission)
            .filter(UserPermission.id == permission_id)
            .first()
        )

    def get_first_for_user(self, user_id: int) -> UserPermission | None:
        """Get the user's oldest permission record."""
        return (
            self.db.query(UserPermission)
            .filter(UserPermission.user_id == user_id)
            .order_by(UserPermission.id)
            .first()
        )

    def user_has_any_role(self, user_id: int, roles: set[Role]) -> bool:
        """Whether any of the user's records carries one of ``roles``."""
        return (
            self.db.query(UserPermission.id)
            .filter(UserPermission.user_id == user_id, UserPermission.role.in_(roles))
            .first()
            is not None
        )

    def add(self, user_id: int, role: Role, task_id: int | None = None) -> UserPermission:
        """Stage a new permission record."""
        permission = UserPermission(user_id=user_id, role=role, task_id=task_id)
        self.db.add(permission)
        self.db.flush()
        return permission

    def delete(self, permission: UserPermission) -> None:
        """Stage deletion of a permission record."""
        self.db.delete(permission)
        self.db.flush()

    # Query construction
    def query(self, scope_user_id: int | None = None, search: str = "") -> Query:
        """Permission records joined to their users.

        Args:
            scope_user_id: Only this user's records when given.
            search: Case-insensitive text in the user's display name or email.
        """
        query = self.db.query(UserPermission).join(UserPermission.user)

        if scope_user_id is not None:
            query = query.filter(UserPermission.user_id == scope_user_id)

        if search and search.strip():
            term = search.strip().lower()
            query = query.filter(
                or_(
                    func.lower(AppUser.display_name).contains(term, autoescape=True),
                    func.lower(AppUser.email).contains(term, autoescape=True),
                )
            )

        return query

    @staticmethod
    def apply_role_filter(query: Query, role: Role | None) -> Query:
        """Keep only records with ``role`` when given."""
        if role is None:
            return query
        return query.filter(UserPermission.role == role)

    @staticmethod
    def fetch_page(query: Query, offset: int, limit: int) -> tuple[list[UserPermission], int]:
        """Count the query, then load one page ordered by record ID."""
        total = query.order_by(None).count()
        items = (
            query.options(joinedload(UserPermission.user))
            .order_by(UserPermission.id)
            .offset(max(offset, 0))
            .limit(limit)
            .all()
        )
        return items, total
