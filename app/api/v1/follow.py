"""Follow and unfollow other users."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser, MessageResponse
from app.services import social

router = APIRouter()


@router.post("/{user_id}", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def follow(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    social.follow_user(db, current_user.id, user_id)
    return MessageResponse(message=f"you followed user {user_id}")


@router.delete("/{user_id}", response_model=MessageResponse)
def unfollow(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    social.unfollow_user(db, current_user.id, user_id)
    return MessageResponse(message=f"you unfollowed user {user_id}")
