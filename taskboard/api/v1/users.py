"""Users router for the user directory."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from taskboard.core.auth.context import SessionContext
from taskboard.core.auth.dependencies import get_current_session
from taskboard.core.db.deps import get_db
from taskboard.schemas.common import StandardResponse
from taskboard.schemas.user import UserResponse
from taskboard.services.user_service import UserService

router = APIRouter()


def get_user_service(db: Annotated[Session, Depends(get_db)]) -> UserService:
    """Dependency to get UserService."""
    return UserService(db)


@router.get(
    "/search",
    response_model=StandardResponse[list[UserResponse]],
    status_code=status.HTTP_200_OK,
    summary="Search users",
    description="Users whose display name or email contains `q` (at most 50).",
)
async def search_users(
    session: Annotated[SessionContext, Depends(get_current_session)],
    service: Annotated[UserService, Depends(get_user_service)],
    q: str = Query("", description="Search text"),
) -> StandardResponse[list[UserResponse]]:
    """Search the user directory."""
    users = service.search_users(q)
    return StandardResponse(data=[UserResponse.from_entity(user) for user in users])
