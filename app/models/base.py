"""SQLAlchemy declarative Base shared by users, refresh tokens, posts and follows."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; Base.metadata is the schema used by Alembic and the tests."""
