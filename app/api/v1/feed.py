"""Paginated home feed: posts from followed users, newest first."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.social import FEED_DEFAULT_LIMIT, FEED_MAX_LIMIT, FeedResponse
from app.services import social

router = APIRouter()


@router.get("", response_model=FeedResponse)
def get_feed(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=FEED_MAX_LIMIT)] = FEED_DEFAULT_LIMIT,
) -> FeedResponse:
    posts = social.get_feed(db, current_user.id, page, limit)
    return FeedResponse(page=page, posts=posts)
