"""Service factories shared by the routers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.services import AuthService, NoteService, UserService
from ..database import get_db_session
from ..integrations.supabase import SupabaseAuthClient, get_supabase_admin, get_supabase_client


def get_auth_service(
    client: SupabaseAuthClient = Depends(get_supabase_client),
    admin: SupabaseAuthClient = Depends(get_supabase_admin),
) -> AuthService:
    return AuthService(client, admin)


def get_user_service(
    session: AsyncSession = Depends(get_db_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserService:
    return UserService(session, auth_service)


def get_note_service(session: AsyncSession = Depends(get_db_session)) -> NoteService:
    return NoteService(session)
