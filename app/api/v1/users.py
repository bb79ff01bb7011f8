"""User directory with follow status, and the caller's following list."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.social import FollowingListResponse, UsersListResponse
from app.services import social

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List every other user, newest first, with isFollowing for the caller."""
    return UsersListResponse(users=social.list_users(db, current_user.id))


@router.get("/following", response_model=FollowingListResponse)
def list_following(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> FollowingListResponse:
    return FollowingListResponse(following=social.list_following(db, current_user.id))
