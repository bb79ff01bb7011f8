"""ORM model for follow edges between users."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, func

from app.models.base import Base


class Follow(Base):
    """Directed edge: follower_id follows followee_id. Self-follows are rejected by the store."""

    __tablename__ = "follows"
    __table_args__ = (
        CheckConstraint("follower_id != followee_id", name="ck_follows_not_self"),
    )

    follower_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    followee_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
