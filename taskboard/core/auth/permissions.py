"""Role definitions and the role-to-capability table.

Roles are persisted by value (``"SuperAdmin"``) and displayed by label
(``"Super Admin"``); the two mappings are kept separate on purpose. Every
authorization decision goes through :func:`role_allows` or
:func:`can_access_task`; nothing else should compare roles directly.
"""

from enum import Enum


class Role(str, Enum):
    """User role. The value is the persisted representation."""

    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    USER = "User"
    READ_ONLY = "ReadOnly"


DEFAULT_ROLE = Role.USER

ROLE_LABELS: dict[Role, str] = {
    Role.SUPER_ADMIN: "Super Admin",
    Role.ADMIN: "Admin",
    Role.USER: "Standard User",
    Role.READ_ONLY: "Read Only",
}

# Capability strings, "{area}.{action}"; task actions come in _own/_all pairs
TASKS_CREATE = "tasks.create"
TASKS_VIEW_OWN = "tasks.view_own"
TASKS_VIEW_ALL = "tasks.view_all"
TASKS_EDIT_OWN = "tasks.edit_own"
TASKS_EDIT_ALL = "tasks.edit_all"
TASKS_DELETE_OWN = "tasks.delete_own"
TASKS_DELETE_ALL = "tasks.delete_all"
PERMISSIONS_MANAGE = "permissions.manage"
PERMISSIONS_EDIT = "permissions.edit"

ROLE_PERMISSIONS: dict[Role, frozenset[str]] = {
    Role.SUPER_ADMIN: frozenset(
        {
            TASKS_CREATE,
            TASKS_VIEW_ALL,
            TASKS_EDIT_ALL,
            TASKS_DELETE_ALL,
            PERMISSIONS_MANAGE,
            PERMISSIONS_EDIT,
        }
    ),
    # Admin edits everything but never deletes, not even its own tasks
    Role.ADMIN: frozenset(
        {
            TASKS_CREATE,
            TASKS_VIEW_ALL,
            TASKS_EDIT_ALL,
            PERMISSIONS_MANAGE,
        }
    ),
    Role.USER: frozenset(
        {
            TASKS_CREATE,
            TASKS_VIEW_OWN,
            TASKS_EDIT_OWN,
            TASKS_DELETE_OWN,
            PERMISSIONS_MANAGE,
        }
    ),
    Role.READ_ONLY: frozenset({TASKS_VIEW_OWN}),
}


def role_label(role: Role) -> str:
    """Human-readable label for a role."""
    return ROLE_LABELS.get(role, role.value)


def parse_role(value: str | Role | None) -> Role:
    """
    Parse a persisted role value.

    Accepts the persisted value (``"SuperAdmin"``) or the enum itself.
    Unknown or empty values resolve to :data:`DEFAULT_ROLE`.
    """
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return DEFAULT_ROLE


def role_allows(role: Role, capability: str) -> bool:
    """
    Check whether a role carries a capability.

    Examples:
        >>> role_allows(Role.ADMIN, PERMISSIONS_EDIT)
        False
        >>> role_allows(Role.SUPER_ADMIN, PERMISSIONS_EDIT)
        True
    """
    return capability in ROLE_PERMISSIONS.get(role, frozenset())


def can_access_task(role: Role, action: str, is_owner: bool) -> bool:
    """
    Decide a task-level action (``view``, ``edit``, ``delete``).

    ``tasks.{action}_all`` grants the action on any task,
    ``tasks.{action}_own`` only on tasks the caller owns.

    Examples:
        >>> can_access_task(Role.ADMIN, "edit", is_owner=False)
        True
        >>> can_access_task(Role.ADMIN, "delete", is_owner=True)
        False
        >>> can_access_task(Role.USER, "view", is_owner=False)
        False
    """
    if role_allows(role, f"tasks.{action}_all"):
        return True
    if role_allows(role, f"tasks.{action}_own"):
        return is_owner
    return False
