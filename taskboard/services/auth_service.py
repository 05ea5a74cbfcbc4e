"""Authentication service: identity verification and user provisioning."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.core.auth.identity import IdentityClaims, IdentityVerifier
from taskboard.core.auth.permissions import DEFAULT_ROLE, Role
from taskboard.core.exceptions import InvalidCredentialError
from taskboard.core.logging import log_auth_failure, log_auth_success, log_permission_change
from taskboard.models.user import AppUser
from taskboard.models.user_permission import UserPermission
from taskboard.repositories.permission_repository import PermissionRepository
from taskboard.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication business logic."""

    def __init__(self, db: Session, verifier: IdentityVerifier | None = None):
        """Initialize service with database session."""
        self.user_repository = UserRepository(db)
        self.permission_repository = PermissionRepository(db)
        self.verifier = verifier or IdentityVerifier()
        self.db = db

    def verify_token(self, token: str) -> IdentityClaims:
        """
        Verify a bearer ID token.

        Raises:
            InvalidCredentialError: If the token cannot be verified.
        """
        try:
            return self.verifier.verify(token)
        except InvalidCredentialError as e:
            log_auth_failure(str(e))
            raise

    def get_or_create_user(self, uid: str, email: str, display_name: str) -> AppUser:
        """
        Find the local user for an identity, creating it on first sight.

        Lookup is by uid first (refreshing a changed email or display name),
        then by email (attaching the uid). A new user gets a permission record
        with the default role, except the very first user of an empty system,
        who becomes super admin. The emptiness check and the insert share one
        transaction.

        Args:
            uid: Identity-provider user id.
            email: Verified email address.
            display_name: Display name from the identity provider.

        Returns:
            The persisted AppUser.
        """
        user = self.user_repository.get_by_external_id(uid)
        if user is not None:
            if user.email != email or user.display_name != display_name:
                user.email = email
                user.display_name = display_name
                user = self.user_repository.save(user)
            log_auth_success(user.id, email)
            return user

        user = self.user_repository.get_by_email(email)
        if user is not None:
            user.external_id = uid
            user = self.user_repository.save(user)
            logger.info(f"Linked identity to existing user {user.id}")
            log_auth_success(user.id, email)
            return user

        return self._create_user(uid, email, display_name)

    def _create_user(self, uid: str, email: str, display_name: str) -> AppUser:
        try:
            role = Role.SUPER_ADMIN if not self.user_repository.any_exists() else DEFAULT_ROLE
            user = AppUser(
                external_id=uid,
                email=email,
                display_name=display_name,
                role=role,
            )
            user.permissions.append(UserPermission(role=role))
            self.user_repository.add(user)
            self.db.commit()
        except IntegrityError:
            # Another request provisioned the same identity first
            self.db.rollback()
            user = self.user_repository.get_by_external_id(uid)
            if user is None:
                raise
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating user for identity {uid}: {e}", exc_info=True)
            raise

        self.db.refresh(user)
        if role == Role.SUPER_ADMIN:
            logger.warning(f"First user {user.id} granted {role.value}")
        log_permission_change(user.id, "grant", target_user_id=user.id, details={"role": role.value})
        log_auth_success(user.id, email, created=True)
        return user

    def get_or_create_user_from_token(self, token: str) -> AppUser:
        """
        Verify a bearer token and return its local user.

        Raises:
            InvalidCredentialError: If the token cannot be verified.
        """
        claims = self.verify_token(token)
        return self.get_or_create_user(claims.uid, claims.email, claims.name)

    def is_user_admin(self, user_id: int) -> bool:
        """Whether the user holds an Admin or SuperAdmin permission record."""
        return self.permission_repository.user_has_any_role(
            user_id, {Role.ADMIN, Role.SUPER_ADMIN}
        )
