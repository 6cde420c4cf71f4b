"""
Supabase auth (GoTrue) client.

Two flavours are handed out as FastAPI dependencies:

- ``get_supabase_client()`` uses the public anon key, for sign-in, token
  refresh, magic links and password reset.
- ``get_supabase_admin()`` uses the service role key, for creating and
  deleting auth accounts. It must never be used to act on behalf of a
  browser-supplied identity.

Each call opens a short-lived ``httpx.AsyncClient``; an instance only holds
configuration so it is safe to share between concurrent requests.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)

__all__ = ["AuthProviderError", "SupabaseAuthClient", "get_supabase_client", "get_supabase_admin"]


class AuthProviderError(Exception):
    """The auth provider rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_unavailable(self) -> bool:
        """No answer, or the provider failed on its side (5xx)."""
        return self.status_code is None or self.status_code >= 500

    def __repr__(self) -> str:
        return f"AuthProviderError(status_code={self.status_code}, message={self.message!r})"


def _error_message(response: httpx.Response) -> str:
    """GoTrue has used several error shapes over time."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        for key in ("error_description", "msg", "message", "error"):
            if data.get(key):
                return str(data[key])
    return response.reason_phrase


class SupabaseAuthClient:
    """
    Thin async wrapper over the GoTrue REST API.

    Example:
        >>> client = SupabaseAuthClient("https://xyz.supabase.co", anon_key)
        >>> data = await client.refresh_session(refresh_token)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Supabase project URL
            api_key: anon or service role key
            timeout: Request timeout in seconds
            transport: custom httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def auth_url(self) -> str:
        return f"{self.base_url}/auth/v1"

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {bearer or self.api_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        bearer: str | None = None,
    ) -> Any:
        async with httpx.AsyncClient(
            base_url=self.auth_url, timeout=self.timeout, transport=self.transport
        ) as client:
            try:
                response = await client.request(
                    method, path, json=json, params=params, headers=self._headers(bearer)
                )
            except httpx.HTTPError as e:
                logger.error("Auth provider request failed: %s %s: %s", method, path, e)
                raise AuthProviderError("auth provider unreachable") from e

        if response.status_code >= 400:
            raise AuthProviderError(_error_message(response), status_code=response.status_code)

        if not response.content:
            return None
        return response.json()

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Exchange email/password for a token bundle."""
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def refresh_session(self, refresh_token: str) -> dict[str, Any]:
        """Exchange a refresh token for a new token bundle."""
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )

    async def sign_in_with_otp(self, email: str, redirect_to: str) -> None:
        """Email a magic link; the link lands on ``redirect_to``."""
        await self._request(
            "POST",
            "/otp",
            params={"redirect_to": redirect_to},
            json={"email": email, "create_user": True},
        )

    async def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        await self._request(
            "POST",
            "/recover",
            params={"redirect_to": redirect_to},
            json={"email": email},
        )

    async def admin_create_user(self, email: str, password: str) -> dict[str, Any]:
        """Create a confirmed email account. Needs the service role key."""
        return await self._request(
            "POST",
            "/admin/users",
            json={"email": email, "password": password, "email_confirm": True},
        )

    async def admin_update_user(
        self, user_id: UUID | str, attributes: dict[str, Any]
    ) -> dict[str, Any]:
        """Update account attributes (password, email...). Needs the service role key."""
        return await self._request("PUT", f"/admin/users/{user_id}", json=attributes)

    async def admin_delete_user(self, user_id: UUID | str) -> None:
        """Delete an auth account. Needs the service role key."""
        await self._request("DELETE", f"/admin/users/{user_id}")

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/health")


def get_supabase_client() -> SupabaseAuthClient:
    """Anon-key client, fine for anything a browser could also do."""
    settings = get_settings()
    return SupabaseAuthClient(
        settings.supabase_url,
        settings.supabase_anon_key,
        timeout=settings.supabase_timeout_seconds,
    )


def get_supabase_admin() -> SupabaseAuthClient:
    """Service-role client with full admin privileges. Server side only."""
    settings = get_settings()
    return SupabaseAuthClient(
        settings.supabase_url,
        settings.supabase_service_role_key.get_secret_value(),
        timeout=settings.supabase_timeout_seconds,
    )
