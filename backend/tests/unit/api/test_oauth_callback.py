"""OAuth / magic link callback (src/supanotes/api/oauth.py)."""

from sqlalchemy import select

from supanotes.config import get_settings
from supanotes.core.models.user import User

COOKIE = get_settings().session_cookie_name


async def test_callback_page_renders_for_anonymous(client):
    resp = await client.get("/oauth/callback", params={"redirectTo": "/notes/new"})
    assert resp.status_code == 200
    assert "supabase-js" in resp.text
    assert '"/notes/new"' in resp.text


async def test_callback_page_redirects_when_signed_in(logged_in_client):
    resp = await logged_in_client.get("/oauth/callback")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/notes"


async def test_callback_without_refresh_token_is_bad_request(client):
    resp = await client.post("/oauth/callback", data={"redirectTo": "/notes"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "invalid-request"}


async def test_callback_with_unknown_refresh_token(client):
    resp = await client.post("/oauth/callback", data={"refreshToken": "rt-forged"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "invalid-refresh-token"}
    assert COOKIE not in client.cookies


async def test_first_provider_sign_in_creates_user_row(client, fake_supabase, session_factory):
    user_id = fake_supabase.add_account("oauth@example.com")
    token = fake_supabase.issue_refresh_token("oauth@example.com")

    resp = await client.post(
        "/oauth/callback", data={"refreshToken": token, "redirectTo": "/notes/new"}
    )

    assert resp.status_code == 303
    assert resp.headers["location"] == "/notes/new"
    assert COOKIE in client.cookies
    async with session_factory() as session:
        row = await session.scalar(select(User).where(User.id == user_id))
    assert row.email == "oauth@example.com"


async def test_returning_user_keeps_existing_row(client, user, fake_supabase):
    token = fake_supabase.issue_refresh_token(user["email"])

    resp = await client.post("/oauth/callback", data={"refreshToken": token})

    assert resp.status_code == 303
    assert resp.headers["location"] == "/notes"
    assert (await client.get("/notes")).status_code == 200


async def test_identity_comes_from_the_exchange_only(client, user, other_user, fake_supabase):
    token = fake_supabase.issue_refresh_token(user["email"])

    # extra fields claiming another identity are ignored
    resp = await client.post(
        "/oauth/callback",
        data={"refreshToken": token, "userId": str(other_user["id"]), "email": other_user["email"]},
    )

    assert resp.status_code == 303
    resp = await client.get("/")
    assert user["email"] in resp.text
    assert other_user["email"] not in resp.text


async def test_row_creation_failure(client, user, fake_supabase):
    # provider account whose email is already used by another row
    fake_supabase.accounts.pop(user["email"])
    fake_supabase.add_account(user["email"])
    token = fake_supabase.issue_refresh_token(user["email"])

    resp = await client.post("/oauth/callback", data={"refreshToken": token})

    assert resp.status_code == 500
    assert resp.json() == {"message": "create-user-error"}
    # restore so the fixture can clean up the original account
    fake_supabase.accounts[user["email"]]["id"] = user["id"]


async def test_offsite_redirect_is_ignored(client, user, fake_supabase):
    token = fake_supabase.issue_refresh_token(user["email"])
    resp = await client.post(
        "/oauth/callback", data={"refreshToken": token, "redirectTo": "//evil.example.com"}
    )
    assert resp.headers["location"] == "/notes"


async def test_provider_outage_is_a_server_error(client, user, fake_supabase):
    token = fake_supabase.issue_refresh_token(user["email"])
    fake_supabase.down = True

    resp = await client.post("/oauth/callback", data={"refreshToken": token})

    assert resp.status_code == 500
    assert resp.json() == {"message": "auth-provider-unavailable"}
    assert COOKIE not in client.cookies
