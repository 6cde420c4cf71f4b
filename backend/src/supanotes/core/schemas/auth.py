"""
Authentication schemas.

``AuthSession`` is the token bundle the provider hands out and the session
cookie carries. The form schemas validate what the login, join, magic link
and OAuth callback pages post.
"""

import time
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


class AuthSession(BaseModel):
    """Provider tokens plus the identity they were issued for."""

    access_token: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)
    user_id: uuid.UUID
    email: str
    expires_in: int = Field(default=3600, ge=0)
    expires_at: int = Field(description="Unix timestamp (seconds)")

    @classmethod
    def from_provider(cls, data: dict[str, Any]) -> "AuthSession":
        """Build a session from a GoTrue token response.

        Raises ValueError/KeyError when the response carries no user identity.
        """
        user = data.get("user") or {}
        if not user.get("id") or not user.get("email"):
            raise ValueError("token response has no user")

        expires_in = int(data.get("expires_in") or 3600)
        expires_at = data.get("expires_at") or int(time.time()) + expires_in

        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            user_id=user["id"],
            email=user["email"].lower(),
            expires_in=expires_in,
            expires_at=int(expires_at),
        )


class AuthAccount(BaseModel):
    """Auth account as returned by the admin API."""

    id: uuid.UUID
    email: str


@dataclass
class MagicLinkResult:
    error: Optional[str] = None


class _EmailField(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class EmailForm(_EmailField):
    """Single email field (magic link, forgot password)."""


class EmailPasswordForm(_EmailField):
    """Login / join form."""

    password: str = Field(min_length=8, max_length=128)
    redirect_to: Optional[str] = Field(default=None, alias="redirectTo")


class OAuthCallbackRequest(BaseModel):
    """Posted by the callback page once the browser SDK sees a sign-in.

    Only the refresh token is accepted; identity is re-derived server side.
    """

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken")
    redirect_to: Optional[str] = Field(default=None, alias="redirectTo")


class ResetPasswordForm(BaseModel):
    """New password plus the recovery refresh token captured by the reset page."""

    model_config = ConfigDict(populate_by_name=True)

    password: str = Field(min_length=8, max_length=128)
    confirm_password: str = Field(alias="confirmPassword")
    refresh_token: str = Field(min_length=1, alias="refreshToken")

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordForm":
        if self.password != self.confirm_password:
            raise ValueError("passwords do not match")
        return self
