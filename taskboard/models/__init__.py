from taskboard.core.db.session import Base
from taskboard.models.task import TaskItem, TaskStatus
from taskboard.models.user import AppUser
from taskboard.models.user_permission import UserPermission

__all__ = [
    "AppUser",
    "Base",
    "TaskItem",
    "TaskStatus",
    "UserPermission",
]
