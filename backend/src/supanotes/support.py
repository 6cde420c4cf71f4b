"""
Test user lifecycle helpers.

Used by the test fixtures and runnable by hand against a dev project:

    python -m supanotes.support create someone@example.com password123
    python -m supanotes.support delete someone@example.com

Only ``@example.com`` addresses are accepted so these helpers can never
touch a real account.
"""

import argparse
import asyncio
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from .core.models import Note
from .core.repositories import NoteRepository, UserRepository
from .core.services import AuthService, UserService
from .integrations.supabase import AuthProviderError

TEST_EMAIL_DOMAIN = "@example.com"


class SupportError(RuntimeError):
    """A test helper could not do its job."""


def _check_test_email(email: str) -> None:
    if not email:
        raise SupportError("email required")
    if not email.lower().endswith(TEST_EMAIL_DOMAIN):
        raise SupportError(f"All test emails must end in {TEST_EMAIL_DOMAIN}")


async def create_account(
    session: AsyncSession, auth_service: AuthService, email: str, password: str
) -> dict:
    """Create a confirmed auth account and its user row; no orphan is left on failure."""
    if not password:
        raise SupportError("email and password required to create account")
    _check_test_email(email)

    try:
        auth_account = await auth_service.create_email_auth_account(email, password)
    except AuthProviderError as e:
        raise SupportError(f"Failed to create test user account for {email}: {e.message}") from e

    user_service = UserService(session, auth_service)
    if not await user_service.try_create_user(auth_account.id, email):
        await user_service.discard_auth_account(auth_account.id)
        raise SupportError(f"Failed to create user row for {email}")
    return {"email": email.lower(), "password": password}


async def delete_user(session: AsyncSession, auth_service: AuthService, email: str) -> None:
    """Remove the row (notes cascade) and the auth account. Missing users are fine."""
    _check_test_email(email)
    try:
        await UserService(session, auth_service).delete_user_account(email)
    except AuthProviderError as e:
        raise SupportError(f"Failed to delete auth account for user {email}: {e.message}") from e


async def get_user_id(session: AsyncSession, email: str) -> UUID:
    user = await UserRepository(session).get_by_email(email)
    if not user:
        raise SupportError(f"User not found with email: {email}")
    return user.id


async def create_note(session: AsyncSession, user_id: UUID, title: str, body: str) -> Note:
    """Insert a note directly, bypassing the pages."""
    if not title or not body:
        raise SupportError("title and body required to create note")
    return await NoteRepository(session).create_note(
        {"title": title, "body": body, "user_id": user_id}
    )


async def _run(args: argparse.Namespace) -> None:
    from .database import AsyncSessionLocal
    from .integrations.supabase import get_supabase_admin, get_supabase_client

    auth_service = AuthService(get_supabase_client(), get_supabase_admin())
    async with AsyncSessionLocal() as session:
        if args.command == "create":
            await create_account(session, auth_service, args.email, args.password)
        else:
            await delete_user(session, auth_service, args.email)


def main() -> None:
    parser = argparse.ArgumentParser(prog="supanotes.support")
    subparsers = parser.add_subparsers(dest="command", required=True)
    create = subparsers.add_parser("create", help="create a test account")
    create.add_argument("email")
    create.add_argument("password")
    delete = subparsers.add_parser("delete", help="delete a test account")
    delete.add_argument("email")

    asyncio.run(_run(parser.parse_args()))


if __name__ == "__main__":
    main()
