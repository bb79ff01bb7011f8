"""ORM model for short text posts."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Text, func

from app.models.base import Base

POST_MAX_LENGTH = 200


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint(f"LENGTH(content) <= {POST_MAX_LENGTH}", name="ck_posts_content_length"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
