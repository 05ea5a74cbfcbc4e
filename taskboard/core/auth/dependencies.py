"""FastAPI dependencies for authentication and authorization."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from taskboard.core.auth.context import SessionContext
from taskboard.core.auth.permissions import role_allows
from taskboard.core.db.deps import get_db
from taskboard.core.exceptions import InvalidCredentialError
from taskboard.core.logging import log_access_denied
from taskboard.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": {
                "code": "AUTH_INVALID_TOKEN",
                "message": message,
                "details": None,
            }
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionContext:
    """
    Resolve the caller from the bearer ID token.

    The local user is provisioned on first sight, so any verified identity
    yields a session.

    Args:
        credentials: Bearer credentials from the Authorization header.
        db: Database session.

    Returns:
        SessionContext for the caller.

    Raises:
        HTTPException: 401 if the token is missing or cannot be verified.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Missing bearer token")

    try:
        user = AuthService(db).get_or_create_user_from_token(credentials.credentials)
    except InvalidCredentialError:
        raise _unauthorized("Invalid or expired token")

    return SessionContext.from_user(user)


def require_capability(capability: str):
    """
    Dependency factory to require a role capability.

    Usage:
        @router.post("")
        async def create_task(
            session: SessionContext = Depends(require_capability(TASKS_CREATE)),
        ):
            ...

    Args:
        capability: Capability string (e.g., "tasks.create").

    Returns:
        Dependency returning the SessionContext, or raising 403.
    """

    async def capability_check(
        session: Annotated[SessionContext, Depends(get_current_session)],
    ) -> SessionContext:
        if not role_allows(session.role, capability):
            log_access_denied(session.user_id, capability)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": {
                        "code": "AUTH_INSUFFICIENT_PERMISSIONS",
                        "message": "Insufficient permissions",
                        "details": {"required_permission": capability},
                    }
                },
            )
        return session

    return capability_check
