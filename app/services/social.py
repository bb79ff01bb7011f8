"""Posts, follow edges, the home feed and user listings."""

import logging

from sqlalchemy import and_, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.models import Follow, Post, User
from app.schemas.social import FollowingItem, PostResponse, UserListItem

logger = logging.getLogger(__name__)


def create_post(db: Session, user_id: int, username: str, content: str) -> PostResponse:
    post = Post(user_id=user_id, content=content)
    db.add(post)
    db.commit()
    db.refresh(post)
    return PostResponse(
        id=post.id,
        user_id=post.user_id,
        username=username,
        content=post.content,
        created_at=post.created_at,
    )


def follow_user(db: Session, follower_id: int, followee_id: int) -> None:
    """Raises BadRequestError for self-follow, NotFoundError for unknown user, ConflictError if already following."""
    if follower_id == followee_id:
        raise BadRequestError("Cannot follow yourself")
    if db.query(User.id).filter(User.id == followee_id).first() is None:
        raise NotFoundError("User not found")
    existing = (
        db.query(Follow)
        .filter(Follow.follower_id == follower_id, Follow.followee_id == followee_id)
        .first()
    )
    if existing is not None:
        raise ConflictError("Already following this user")

    db.add(Follow(follower_id=follower_id, followee_id=followee_id))
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Already following this user") from e
    logger.info("Follow created", extra={"follower_id": follower_id, "followee_id": followee_id})


def unfollow_user(db: Session, follower_id: int, followee_id: int) -> None:
    deleted = (
        db.query(Follow)
        .filter(Follow.follower_id == follower_id, Follow.followee_id == followee_id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        db.rollback()
        raise NotFoundError("Not following this user")
    db.commit()


def get_feed(db: Session, user_id: int, page: int, limit: int) -> list[PostResponse]:
    """Posts by users that user_id follows, newest first, one page of at most limit items."""
    offset = (page - 1) * limit
    rows = (
        db.query(Post, User.username)
        .join(Follow, Follow.followee_id == Post.user_id)
        .join(User, User.id == Post.user_id)
        .filter(Follow.follower_id == user_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return [
        PostResponse(
            id=post.id,
            user_id=post.user_id,
            username=username,
            content=post.content,
            created_at=post.created_at,
        )
        for post, username in rows
    ]


def list_users(db: Session, current_user_id: int) -> list[UserListItem]:
    """All users except the caller, newest first, each flagged with whether the caller follows them."""
    is_following = case((Follow.follower_id.is_not(None), True), else_=False)
    rows = (
        db.query(User.id, User.username, User.created_at, is_following)
        .outerjoin(
            Follow,
            and_(Follow.followee_id == User.id, Follow.follower_id == current_user_id),
        )
        .filter(User.id != current_user_id)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )
    return [
        UserListItem(
            id=uid,
            username=username,
            is_following=bool(following),
            created_at=created_at,
        )
        for uid, username, created_at, following in rows
    ]


def list_following(db: Session, user_id: int) -> list[FollowingItem]:
    rows = (
        db.query(User.id, User.username, Follow.created_at)
        .join(Follow, Follow.followee_id == User.id)
        .filter(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc(), User.id.desc())
        .all()
    )
    return [
        FollowingItem(id=uid, username=username, followed_at=followed_at)
        for uid, username, followed_at in rows
    ]
