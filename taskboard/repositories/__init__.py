"""Repositories for data access operations."""

from taskboard.repositories.permission_repository import PermissionRepository
from taskboard.repositories.task_repository import TaskRepository
from taskboard.repositories.user_repository import UserRepository

__all__ = [
    "PermissionRepository",
    "TaskRepository",
    "UserRepository",
]
