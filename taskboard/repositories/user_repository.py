"""User repository for user data access."""

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from taskboard.models.user import AppUser


class UserRepository:
    """Repository for user data access."""

    def __init__(self, db: Session):
        """Initialize repository with database session."""
        self.db = db

    def get_by_id(self, user_id: int) -> AppUser | None:
        """Get user by ID."""
        return self.db.query(AppUser).filter(AppUser.id == user_id).first()

    def get_by_external_id(self, external_id: str) -> AppUser | None:
        """Get user by identity-provider uid."""
        return self.db.query(AppUser).filter(AppUser.external_id == external_id).first()

    def get_by_email(self, email: str) -> AppUser | None:
        """Get user by email."""
        return self.db.query(AppUser).filter(AppUser.email == email).first()

    def any_exists(self) -> bool:
        """Whether at least one user exists."""
        return self.db.query(AppUser.id).first() is not None

    def get_all(self) -> list[AppUser]:
        """All users ordered by display name."""
        return self.db.query(AppUser).order_by(AppUser.display_name).all()

    def search(self, term: str, limit: int) -> list[AppUser]:
        """Users whose display name or email contains ``term`` (case-insensitive)."""
        query = self.db.query(AppUser)
        if term and term.strip():
            needle = term.strip().lower()
            query = query.filter(
                or_(
                    func.lower(AppUser.display_name).contains(needle, autoescape=True),
                    func.lower(AppUser.email).contains(needle, autoescape=True),
                )
            )
        return query.order_by(AppUser.display_name).limit(limit).all()

    def add(self, user: AppUser) -> AppUser:
        """Stage a new user."""
        self.db.add(user)
        self.db.flush()
        return user

    def save(self, user: AppUser) -> AppUser:
        """Commit pending changes on a loaded user."""
        self.db.commit()
        self.db.refresh(user)
        return user
