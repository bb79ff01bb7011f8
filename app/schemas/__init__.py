"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CredentialsRequest,
    CurrentUser,
    MessageResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterResponse,
    TokenResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.social import (
    FeedResponse,
    FollowingItem,
    FollowingListResponse,
    PostCreateRequest,
    PostResponse,
    UserListItem,
    UsersListResponse,
)

__all__ = [
    "CredentialsRequest",
    "CurrentUser",
    "FeedResponse",
    "FollowingItem",
    "FollowingListResponse",
    "HealthResponse",
    "MessageResponse",
    "PostCreateRequest",
    "PostResponse",
    "RefreshTokenRequest",
    "RefreshTokenResponse",
    "RegisterResponse",
    "TokenResponse",
    "UserListItem",
    "UsersListResponse",
]
