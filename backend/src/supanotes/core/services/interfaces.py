"""
Service interfaces for SupaNotes.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..models.user import User
from ..schemas.auth import AuthAccount, AuthSession, MagicLinkResult
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import NoteCreate, NoteListItem, NoteResponse, NoteUpdate


class IAuthService(ABC):
    """Calls into the hosted auth provider."""

    @abstractmethod
    async def sign_in_with_email(self, email: str, password: str) -> Optional[AuthSession]:
        """Password sign-in, None when the provider refuses."""
        pass

    @abstractmethod
    async def refresh_access_token(self, refresh_token: str) -> Optional[AuthSession]:
        """Fresh session from a refresh token, None when it is invalid."""
        pass

    @abstractmethod
    async def send_magic_link(self, email: str) -> MagicLinkResult:
        """Email a passwordless sign-in link."""
        pass

    @abstractmethod
    async def send_reset_password_link(self, email: str) -> None:
        """Email a password reset link, never reports failure."""
        pass

    @abstractmethod
    async def create_email_auth_account(self, email: str, password: str) -> AuthAccount:
        """Create a confirmed auth account."""
        pass

    @abstractmethod
    async def update_account_password(self, user_id: UUID, password: str) -> None:
        """Replace the password of an account."""
        pass

    @abstractmethod
    async def delete_auth_account(self, user_id: UUID) -> None:
        """Delete an auth account."""
        pass


class IUserService(ABC):
    """App-side user rows."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def try_create_user(self, user_id: UUID, email: str) -> Optional[User]:
        """Create the row for an auth account, None if the insert fails."""
        pass

    @abstractmethod
    async def create_user_account(self, email: str, password: str) -> Optional[AuthSession]:
        """Auth account + sign-in + row, all or nothing."""
        pass

    @abstractmethod
    async def delete_user_account(self, email: str) -> None:
        """Remove the row and the auth account behind it."""
        pass


class INoteService(ABC):
    """Note CRUD scoped to one owner."""

    @abstractmethod
    async def list_user_notes(self, user_id: UUID) -> List[NoteListItem]:
        pass

    @abstractmethod
    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        pass

    @abstractmethod
    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        pass

    @abstractmethod
    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        pass

    @abstractmethod
    async def delete_note(self, note_id: UUID, user_id: UUID) -> None:
        pass


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        pass

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        pass

    @abstractmethod
    async def check_auth_provider_health(self) -> Dict[str, Any]:
        """Check the auth provider answers."""
        pass
