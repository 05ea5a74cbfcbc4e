"""Permissions router for permission record management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from taskboard.core.auth.context import SessionContext
from taskboard.core.auth.dependencies import get_current_session
from taskboard.core.db.deps import get_db
from taskboard.core.exceptions import raise_forbidden
from taskboard.schemas.common import (
    ErrorResponse,
    PaginationMeta,
    StandardListResponse,
    StandardResponse,
)
from taskboard.schemas.permission import (
    PermissionCapabilities,
    PermissionQuery,
    PermissionRecord,
    PermissionSaveRequest,
)
from taskboard.schemas.user import UserResponse
from taskboard.services.permission_service import PermissionService

router = APIRouter()


def get_permission_service(db: Annotated[Session, Depends(get_db)]) -> PermissionService:
    """Dependency to get PermissionService."""
    return PermissionService(db)


@router.get(
    "/capabilities",
    response_model=StandardResponse[PermissionCapabilities],
    status_code=status.HTTP_200_OK,
    summary="Caller capabilities",
    description="What the caller may do with tasks and permission records.",
)
async def get_capabilities(
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[PermissionService, Depends(get_permission_service)],
) -> StandardResponse[PermissionCapabilities]:
    """Get the caller's capabilities."""
    return StandardResponse(data=service.get_capabilities(session.user_id))


@router.post(
    "/query",
    response_model=StandardListResponse[PermissionRecord],
    status_code=status.HTTP_200_OK,
    summary="Query permission records",
    description=(
        "Load a page of permission records (0-based), merged with the caller's "
        "unsaved additions and removals. Requires permissions.manage."
    ),
)
async def query_permissions(
    query: PermissionQuery,
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[PermissionService, Depends(get_permission_service)],
) -> StandardListResponse[PermissionRecord]:
    """Query permission records."""
    if not service.can_manage_permissions(session.user_id):
        raise_forbidden(details={"required_permission": "permissions.manage"})

    grid = service.load_user_permissions(
        query.state,
        session.user_id,
        search=query.search,
        local_additions=query.local_additions,
        local_removals=query.local_removals,
    )
    return StandardListResponse(
        data=grid.items,
        meta=PaginationMeta.build(grid.total_items, query.state.page, query.state.page_size),
    )


@router.post(
    "/save",
    response_model=StandardResponse[dict],
    status_code=status.HTTP_200_OK,
    summary="Save permission changes",
    description=(
        "Apply additions and removals atomically. Requires permissions.edit. "
        "Removing your own record is rejected with 409 and nothing is saved."
    ),
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    },
)
async def save_permissions(
    request: PermissionSaveRequest,
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[PermissionService, Depends(get_permission_service)],
) -> StandardResponse[dict]:
    """Save permission changes."""
    saved = service.save_changes(
        request.local_additions, request.local_removals, session.user_id
    )
    if not saved:
        raise_forbidden(details={"required_permission": "permissions.edit"})

    return StandardResponse(
        data={
            "added": len(request.local_additions),
            "removed": len(request.local_removals),
        }
    )


@router.get(
    "/users",
    response_model=StandardResponse[list[UserResponse]],
    status_code=status.HTTP_200_OK,
    summary="Users available for grants",
    description="All users, or at most 10 matching `search`. Requires permissions.manage.",
)
async def list_available_users(
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[PermissionService, Depends(get_permission_service)],
    search: str | None = Query(None, description="Text in display name or email"),
) -> StandardResponse[list[UserResponse]]:
    """List users that permissions can be granted to."""
    if not service.can_manage_permissions(session.user_id):
        raise_forbidden(details={"required_permission": "permissions.manage"})

    users = service.search_users(search) if search else service.get_available_users()
    return StandardResponse(data=[UserResponse.from_entity(user) for user in users])
