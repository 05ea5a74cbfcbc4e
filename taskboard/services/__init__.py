"""Services for business logic."""

from taskboard.services.auth_service import AuthService
from taskboard.services.permission_service import PermissionService
from taskboard.services.statistics_service import StatisticsService
from taskboard.services.task_service import TaskService
from taskboard.services.user_service import UserService

__all__ = [
    "AuthService",
    "PermissionService",
    "StatisticsService",
    "TaskService",
    "UserService",
]
