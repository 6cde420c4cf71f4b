"""Authentication service implementation."""

import logging
from typing import Optional
from uuid import UUID

from pydantic import ValidationError

from ...config import Settings, get_settings
from ...integrations.supabase import AuthProviderError, SupabaseAuthClient
from ..schemas.auth import AuthAccount, AuthSession, MagicLinkResult
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Authentication service backed by the hosted auth provider.

    ``client`` carries the anon key, ``admin`` the service role key. Only the
    account creation/deletion calls touch ``admin``.
    """

    def __init__(
        self,
        client: SupabaseAuthClient,
        admin: SupabaseAuthClient,
        settings: Optional[Settings] = None,
    ):
        self.client = client
        self.admin = admin
        self.settings = settings or get_settings()

    @property
    def callback_url(self) -> str:
        return f"{self.settings.public_server_url}/oauth/callback"

    def _to_auth_session(self, data: dict) -> Optional[AuthSession]:
        try:
            return AuthSession.from_provider(data or {})
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.error(f"Auth provider returned an unusable session: {e}")
            return None

    async def sign_in_with_email(self, email: str, password: str) -> Optional[AuthSession]:
        """Password sign-in.

        None when the provider refuses the credentials. Raises AuthProviderError
        when the provider cannot answer.
        """
        try:
            data = await self.client.sign_in_with_password(email.lower(), password)
        except AuthProviderError as e:
            if e.is_unavailable:
                raise
            logger.info(f"Password sign-in refused: {e.message}")
            return None

        return self._to_auth_session(data)

    async def refresh_access_token(self, refresh_token: str) -> Optional[AuthSession]:
        """Exchange a refresh token for a verified session.

        None when the token is refused. Raises AuthProviderError when the
        provider cannot answer.
        """
        if not refresh_token:
            return None

        try:
            data = await self.client.refresh_session(refresh_token)
        except AuthProviderError as e:
            if e.is_unavailable:
                raise
            logger.info(f"Refresh token rejected: {e.message}")
            return None

        return self._to_auth_session(data)

    async def send_magic_link(self, email: str) -> MagicLinkResult:
        """Email a magic link pointing back at the OAuth callback page."""
        try:
            await self.client.sign_in_with_otp(email.lower(), redirect_to=self.callback_url)
        except AuthProviderError as e:
            return MagicLinkResult(error=e.message)

        return MagicLinkResult()

    async def send_reset_password_link(self, email: str) -> None:
        """Email a reset link; failures are logged only."""
        try:
            await self.client.reset_password_for_email(
                email.lower(), redirect_to=f"{self.settings.public_server_url}/reset-password"
            )
        except AuthProviderError as e:
            logger.warning(f"Password reset email not sent: {e.message}")

    async def create_email_auth_account(self, email: str, password: str) -> AuthAccount:
        """Create a confirmed email/password account. Raises AuthProviderError."""
        data = await self.admin.admin_create_user(email.lower(), password)
        try:
            return AuthAccount.model_validate(data)
        except ValidationError as e:
            raise AuthProviderError(f"unexpected admin response: {e}") from e

    async def delete_auth_account(self, user_id: UUID) -> None:
        """Delete an auth account. Raises AuthProviderError."""
        await self.admin.admin_delete_user(user_id)
        logger.info(f"Deleted auth account {user_id}")

    async def update_account_password(self, user_id: UUID, password: str) -> None:
        """Set a new password on an account. Raises AuthProviderError."""
        await self.admin.admin_update_user(user_id, {"password": password})
