"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.follow import Follow
from app.models.post import Post
from app.models.refresh_token import RefreshToken
from app.models.user import User

__all__ = ["Base", "Follow", "Post", "RefreshToken", "User"]
