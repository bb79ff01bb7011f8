"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    USERNAME_PATTERN,
)


class CredentialsRequest(BaseModel):
    """Username and password, used for both registration and login."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        pattern=USERNAME_PATTERN,
        description="Username (letters, digits, underscore)",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )


class RegisterResponse(BaseModel):
    """Created account. Never includes the password or its hash."""

    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Access and refresh token pair returned after successful login."""

    token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., alias="refreshToken", description="Opaque refresh token")
    expires_in: int = Field(..., alias="expiresIn", description="Access token lifetime in seconds")

    model_config = ConfigDict(populate_by_name=True)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken", min_length=1, max_length=255)

    model_config = ConfigDict(populate_by_name=True)


class RefreshTokenResponse(BaseModel):
    """New access token plus the rotated refresh token that replaces the one presented."""

    token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., alias="refreshToken", description="Rotated refresh token")
    expires_in: int = Field(..., alias="expiresIn", description="Access token lifetime in seconds")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


class CurrentUser(BaseModel):
    """Authenticated principal (id, username) taken from the access token."""

    id: int
    username: str
