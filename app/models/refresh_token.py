"""ORM model for server-side refresh tokens."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, false, func

from app.models.base import Base


class RefreshToken(Base):
    """
    Opaque, single-use refresh token owned by one user.

    expires_at is fixed at issuance. Once is_revoked is set it is never cleared;
    revoked and expired rows are removed by the cleanup sweep.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String(255), nullable=False, unique=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    is_revoked = Column(Boolean, nullable=False, default=False, server_default=false())
