"""Schemas for posts, follows, the feed and user listings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.post import POST_MAX_LENGTH

FEED_DEFAULT_LIMIT = 10
FEED_MAX_LIMIT = 100


class PostCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=POST_MAX_LENGTH)


class PostResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    username: str
    content: str
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class FeedResponse(BaseModel):
    """One page of posts from followed users, newest first."""

    page: int
    posts: list[PostResponse]


class UserListItem(BaseModel):
    """User entry with the caller's follow status."""

    id: int
    username: str
    is_following: bool = Field(..., alias="isFollowing")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class UsersListResponse(BaseModel):
    users: list[UserListItem]


class FollowingItem(BaseModel):
    id: int
    username: str
    followed_at: datetime = Field(..., alias="followedAt")

    model_config = ConfigDict(populate_by_name=True)


class FollowingListResponse(BaseModel):
    following: list[FollowingItem]
