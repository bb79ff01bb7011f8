"""Register, login, refresh-token and logout routes plus the bearer-token dependency."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import UnauthorizedError
from app.core.security import decode_access_token
from app.schemas.auth import (
    CredentialsRequest,
    CurrentUser,
    MessageResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
    RegisterResponse,
    TokenResponse,
)
from app.services import session_manager

router = APIRouter()
security = HTTPBearer(auto_error=False)

ACCESS_TOKEN_REQUIRED = "Access token required"
INVALID_ACCESS_TOKEN = "Invalid or expired token"


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the caller. Raises 401 if missing or invalid.

    Verification is signature and expiry only; no database lookup, so a logout
    does not invalidate access tokens already issued.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(ACCESS_TOKEN_REQUIRED)
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise UnauthorizedError(INVALID_ACCESS_TOKEN)
    username = payload.get("username")
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError(INVALID_ACCESS_TOKEN)
    if not isinstance(username, str) or not username:
        raise UnauthorizedError(INVALID_ACCESS_TOKEN)
    return CurrentUser(id=user_id, username=username)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: CredentialsRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RegisterResponse:
    """Create an account. Returns id and username only."""
    user = session_manager.register_user(db, body.username, body.password, settings)
    return RegisterResponse(id=user.id, username=user.username)


@router.post("/login", response_model=TokenResponse)
def login(
    body: CredentialsRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns an access token and a refresh token.
    Include the access token in the Authorization header as: Bearer <token>
    """
    pair = session_manager.login(db, body.username, body.password, settings)
    return TokenResponse(
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_in=pair.expires_in,
    )


@router.post("/refresh-token", response_model=RefreshTokenResponse)
def refresh_token(
    body: RefreshTokenRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RefreshTokenResponse:
    """Exchange a refresh token for a new access token. The presented refresh token is consumed."""
    pair = session_manager.refresh_session(db, body.refresh_token, settings)
    return RefreshTokenResponse(
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_in=pair.expires_in,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Revoke every refresh token of the caller."""
    session_manager.logout(db, current_user.id)
    return MessageResponse(message="Logged out successfully")
