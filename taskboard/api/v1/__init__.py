"""API v1 router aggregation."""

from fastapi import APIRouter

from taskboard.api.v1 import auth, permissions, tasks, users

api_router = APIRouter()

# Include module routers
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
