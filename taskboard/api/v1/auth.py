"""Auth router: the caller's session and profile."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskboard.core.auth.context import SessionContext
from taskboard.core.auth.dependencies import get_current_session
from taskboard.core.db.deps import get_db
from taskboard.core.exceptions import raise_not_found
from taskboard.schemas.common import StandardResponse
from taskboard.schemas.user import ProfileResponse, ProfileUpdate, UserResponse
from taskboard.services.user_service import UserService

router = APIRouter()


def _profile(service: UserService, user) -> ProfileResponse:
    return ProfileResponse(
        **UserResponse.from_entity(user).model_dump(),
        task_count=service.get_user_task_count(user.id),
        completed_task_count=service.get_completed_task_count(user.id),
    )


@router.get(
    "/me",
    response_model=StandardResponse[ProfileResponse],
    status_code=status.HTTP_200_OK,
    summary="Current user",
    description="The caller's profile. The user is created on the first call.",
)
async def get_me(
    session: Annotated[SessionContext, Depends(get_current_session)],
    db: Annotated[Session, Depends(get_db)],
) -> StandardResponse[ProfileResponse]:
    """Get the caller's profile."""
    service = UserService(db)
    user = service.get_user_by_id(session.user_id)
    if user is None:
        raise_not_found("User", session.user_id)
    return StandardResponse(data=_profile(service, user))


@router.patch(
    "/me",
    response_model=StandardResponse[ProfileResponse],
    status_code=status.HTTP_200_OK,
    summary="Update profile",
    description="Change the caller's display name.",
)
async def update_me(
    profile: ProfileUpdate,
    session: Annotated[SessionContext, Depends(get_current_session)],
    db: Annotated[Session, Depends(get_db)],
) -> StandardResponse[ProfileResponse]:
    """Update the caller's display name."""
    service = UserService(db)
    user = service.update_display_name(session.user_id, profile.display_name)
    if user is None:
        raise_not_found("User", session.user_id)
    return StandardResponse(data=_profile(service, user))
