"""Unit tests for UserService (user rows kept in step with auth accounts)."""

import uuid

import pytest
from sqlalchemy import func, select

from supanotes import support
from supanotes.core.models.note import Note
from supanotes.core.repositories.user_repository import UserRepository
from supanotes.core.services.user_service import UserService
from supanotes.integrations.supabase import AuthProviderError


async def test_create_user_account(test_session, auth_service, fake_supabase):
    service = UserService(test_session, auth_service)

    auth_session = await service.create_user_account("New@Example.com", "password-123")

    assert auth_session is not None
    user = await service.get_user_by_email("new@example.com")
    assert user.id == auth_session.user_id == fake_supabase.accounts["new@example.com"]["id"]
    assert (await service.get_user_by_id(user.id)).email == "new@example.com"


async def test_create_user_account_rolls_back_auth_account_when_sign_in_fails(
    test_session, auth_service, fake_supabase
):
    fake_supabase.fail_password_grant = True
    service = UserService(test_session, auth_service)

    assert await service.create_user_account("new@example.com", "password-123") is None
    assert fake_supabase.accounts == {}
    assert await service.get_user_by_email("new@example.com") is None


async def test_try_create_user_is_none_on_duplicate(test_session, auth_service):
    service = UserService(test_session, auth_service)
    user_id = uuid.uuid4()

    assert await service.try_create_user(user_id, "dup@example.com")
    # same email, different id: unique constraint
    assert await service.try_create_user(uuid.uuid4(), "Dup@Example.com") is None
    # session is usable again after the failed insert
    assert (await service.get_user_by_email("dup@example.com")).id == user_id


async def test_delete_user_account_removes_row_notes_and_auth_account(
    test_session, auth_service, fake_supabase
):
    await support.create_account(test_session, auth_service, "gone@example.com", "password-123")
    user_id = await support.get_user_id(test_session, "gone@example.com")
    await support.create_note(test_session, user_id, "Title", "Body")

    await UserService(test_session, auth_service).delete_user_account("gone@example.com")

    assert await UserRepository(test_session).get_by_id(user_id) is None
    count = await test_session.scalar(select(func.count()).select_from(Note))
    assert count == 0
    assert "gone@example.com" not in fake_supabase.accounts


async def test_delete_unknown_user_is_a_no_op(test_session, auth_service, fake_supabase):
    await UserService(test_session, auth_service).delete_user_account("ghost@example.com")
    assert not [call for call in fake_supabase.calls if call[0] == "DELETE"]


async def test_create_user_account_removes_auth_account_when_provider_goes_down(
    test_session, auth_service, fake_supabase, monkeypatch
):
    service = UserService(test_session, auth_service)

    async def sign_in_outage(email, password):
        raise AuthProviderError("auth provider unreachable")

    monkeypatch.setattr(auth_service, "sign_in_with_email", sign_in_outage)

    with pytest.raises(AuthProviderError):
        await service.create_user_account("new@example.com", "password-123")

    assert fake_supabase.accounts == {}
    assert await service.get_user_by_email("new@example.com") is None
