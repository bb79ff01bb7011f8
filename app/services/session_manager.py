"""
Session management: registration, login, refresh-token rotation and logout.

Access tokens are stateless JWTs. Refresh tokens are opaque random strings
stored in refresh_tokens; each one is single-use and a successful login
revokes every earlier refresh token of the same user.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, UnauthorizedError
from app.core.security import (
    create_access_token,
    generate_refresh_token,
    hash_password,
    verify_password,
)
from app.models import RefreshToken, User

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid or expired refresh token"
USERNAME_TAKEN = "Username already exists"

# Attempts at inserting a fresh refresh token before giving up on unique collisions.
MAX_TOKEN_INSERT_ATTEMPTS = 3


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int


def register_user(db: Session, username: str, password: str, settings: "Settings") -> User:
    """
    Create a user with a bcrypt-hashed password.

    Raises ConflictError if the username is taken, including when a concurrent
    registration wins the unique constraint between the check and the insert.
    """
    existing = db.query(User.id).filter(User.username == username).first()
    if existing is not None:
        raise ConflictError(USERNAME_TAKEN)

    user = User(
        username=username,
        password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(USERNAME_TAKEN) from e
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "username": user.username})
    return user


def login(db: Session, username: str, password: str, settings: "Settings") -> TokenPair:
    """
    Verify credentials and start a new session.

    Unknown usernames and wrong passwords fail with the same message. On success
    every earlier refresh token of the user is revoked before the new pair is issued.
    """
    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Login failed", extra={"username": username})
        raise UnauthorizedError(INVALID_CREDENTIALS)

    revoke_all_user_tokens(db, user.id)
    db.commit()
    pair = issue_token_pair(db, user.id, user.username, settings)
    logger.info("User logged in", extra={"user_id": user.id})
    return pair


def issue_token_pair(
    db: Session,
    user_id: int,
    username: str,
    settings: "Settings",
) -> TokenPair:
    """
    Sign an access token and persist a new refresh token for the user.

    Commits the insert. Callers commit their own revocations first so a retried
    insert never rolls them back.
    """
    access_token = create_access_token(
        user_id,
        username,
        expires_delta=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    )
    expires_at = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    for attempt in range(1, MAX_TOKEN_INSERT_ATTEMPTS + 1):
        refresh_token = generate_refresh_token()
        db.add(RefreshToken(token=refresh_token, user_id=user_id, expires_at=expires_at))
        try:
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Refresh token collision; regenerating",
                extra={"user_id": user_id, "attempt": attempt},
            )
    else:
        raise RuntimeError("Could not issue a unique refresh token")

    return TokenPair(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.access_token_expires_in,
    )


def refresh_session(db: Session, refresh_token: str, settings: "Settings") -> TokenPair:
    """
    Exchange a valid refresh token for a new token pair.

    The presented token is consumed with a conditional update, so of two
    concurrent calls with the same token exactly one succeeds and the other
    raises UnauthorizedError.
    """
    now = datetime.now(timezone.utc)
    row = (
        db.query(RefreshToken.id, User.id, User.username)
        .join(User, User.id == RefreshToken.user_id)
        .filter(
            RefreshToken.token == refresh_token,
            RefreshToken.is_revoked.is_(False),
            RefreshToken.expires_at > now,
        )
        .first()
    )
    if row is None:
        logger.warning("Refresh rejected: unknown, revoked or expired token")
        raise UnauthorizedError(INVALID_REFRESH_TOKEN)

    token_id, user_id, username = row
    consumed = (
        db.query(RefreshToken)
        .filter(RefreshToken.id == token_id, RefreshToken.is_revoked.is_(False))
        .update({RefreshToken.is_revoked: True}, synchronize_session=False)
    )
    if consumed != 1:
        db.rollback()
        logger.warning("Refresh rejected: token already consumed", extra={"user_id": user_id})
        raise UnauthorizedError(INVALID_REFRESH_TOKEN)
    db.commit()

    return issue_token_pair(db, user_id, username, settings)


def revoke_all_user_tokens(db: Session, user_id: int) -> int:
    """Mark every live refresh token of the user revoked. Flushes, does not commit."""
    return (
        db.query(RefreshToken)
        .filter(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
        .update({RefreshToken.is_revoked: True}, synchronize_session=False)
    )


def logout(db: Session, user_id: int) -> int:
    """
    Revoke all refresh tokens of the user and return how many were revoked.

    Access tokens already handed out stay valid until their own expiry.
    """
    revoked = revoke_all_user_tokens(db, user_id)
    db.commit()
    logger.info("User logged out", extra={"user_id": user_id, "tokens_revoked": revoked})
    return revoked
