"""API routes."""

from fastapi import APIRouter

from app.api.v1 import auth, feed, follow, health, posts, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(posts.router, prefix="/posts", tags=["posts"])
router.include_router(follow.router, prefix="/follow", tags=["follow"])
router.include_router(feed.router, prefix="/feed", tags=["feed"])
router.include_router(users.router, prefix="/users", tags=["users"])
