"""Authentication and authorization core module."""

from taskboard.core.auth.identity import (
    IdentityClaims,
    IdentityVerifier,
    create_identity_token,
)
from taskboard.core.auth.permissions import (
    DEFAULT_ROLE,
    ROLE_PERMISSIONS,
    Role,
    can_access_task,
    parse_role,
    role_allows,
    role_label,
)

__all__ = [
    "IdentityClaims",
    "IdentityVerifier",
    "create_identity_token",
    "DEFAULT_ROLE",
    "ROLE_PERMISSIONS",
    "Role",
    "can_access_task",
    "parse_role",
    "role_allows",
    "role_label",
]
