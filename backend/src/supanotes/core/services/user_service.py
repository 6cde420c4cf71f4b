"""User service implementation."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...integrations.supabase import AuthProviderError
from ..models.user import User
from ..repositories.user_repository import UserRepository
from ..schemas.auth import AuthSession
from .interfaces import IAuthService, IUserService

logger = logging.getLogger(__name__)


class UserService(IUserService):
    """User rows, kept in step with auth accounts."""

    def __init__(self, session: AsyncSession, auth_service: IAuthService):
        self.session = session
        self.user_repo = UserRepository(session)
        self.auth_service = auth_service

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self.user_repo.get_by_email(email)

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return await self.user_repo.get_by_id(user_id)

    async def try_create_user(self, user_id: UUID, email: str) -> Optional[User]:
        """Create the row for an auth account, None if the insert fails."""
        try:
            return await self.user_repo.create_user({"id": user_id, "email": email.lower()})
        except IntegrityError as e:
            await self.session.rollback()
            logger.error(f"Could not create user row for {user_id}: {e.orig}")
            return None

    async def create_user_account(self, email: str, password: str) -> Optional[AuthSession]:
        """Create auth account, sign in, create row.

        Provider errors from account creation propagate. If sign-in or the
        row insert fails the new auth account is removed again and None is
        returned; a provider outage during sign-in is re-raised after that.
        """
        auth_account = await self.auth_service.create_email_auth_account(email, password)

        try:
            auth_session = await self.auth_service.sign_in_with_email(email, password)
        except AuthProviderError:
            await self.discard_auth_account(auth_account.id)
            raise
        if not auth_session:
            await self.discard_auth_account(auth_account.id)
            return None

        user = await self.try_create_user(auth_session.user_id, auth_session.email)
        if not user:
            await self.discard_auth_account(auth_account.id)
            return None

        return auth_session

    async def delete_user_account(self, email: str) -> None:
        """Delete row (notes cascade) and then the auth account."""
        user = await self.user_repo.get_by_email(email)
        if not user:
            logger.info(f"No user row for {email}, nothing to delete")
            return

        user_id = user.id
        await self.user_repo.delete_user(user_id)
        await self.auth_service.delete_auth_account(user_id)

    async def discard_auth_account(self, user_id: UUID) -> None:
        """Best-effort removal of an auth account that never got its row."""
        try:
            await self.auth_service.delete_auth_account(user_id)
        except AuthProviderError as e:
            logger.error(f"Orphaned auth account {user_id} could not be removed: {e.message}")
