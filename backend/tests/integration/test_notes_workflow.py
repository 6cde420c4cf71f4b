"""End-to-end flows through the pages, two users side by side."""

import httpx
import pytest

from supanotes.config import get_settings

COOKIE = get_settings().session_cookie_name


@pytest.fixture
async def second_client(test_app):
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


async def test_register_then_login_lands_on_notes(client, fake_supabase):
    email = "journey@example.com"

    resp = await client.post("/join", data={"email": email, "password": "password-123"})
    assert resp.headers["location"] == "/notes"

    await client.post("/logout")
    resp = await client.post("/login", data={"email": email, "password": "password-123"})
    assert resp.status_code == 303
    assert resp.headers["location"] == "/notes"

    resp = await client.get(resp.headers["location"])
    assert resp.status_code == 200
    assert "No notes yet" in resp.text


async def test_users_never_see_each_others_notes(
    client, second_client, user, other_user, login_as
):
    await login_as(client, user)
    await login_as(second_client, other_user)

    resp = await client.post("/notes/new", data={"title": "U1 secret", "body": "for me only"})
    u1_note = resp.headers["location"]
    await second_client.post("/notes/new", data={"title": "U2 list", "body": "eggs"})

    u1_list = (await client.get("/notes")).text
    u2_list = (await second_client.get("/notes")).text
    assert "U1 secret" in u1_list and "U2 list" not in u1_list
    assert "U2 list" in u2_list and "U1 secret" not in u2_list

    # same answer as a note that does not exist
    assert (await second_client.get(u1_note)).status_code == 404
    assert (await second_client.get(f"{u1_note}/edit")).status_code == 404
    assert (await second_client.post(u1_note)).status_code == 404
    resp = await second_client.post(f"{u1_note}/edit", data={"title": "mine now", "body": "x"})
    assert resp.status_code == 404

    resp = await client.get(u1_note)
    assert resp.status_code == 200
    assert "for me only" in resp.text


async def test_after_logout_every_notes_page_redirects(client, user, login_as):
    await login_as(client, user)
    resp = await client.post("/notes/new", data={"title": "Kept", "body": "x"})
    note_path = resp.headers["location"]

    await client.post("/logout")

    for path in ("/notes", "/notes/new", note_path, f"{note_path}/edit"):
        resp = await client.get(path)
        assert resp.status_code == 303
        assert resp.headers["location"].startswith("/login?redirectTo=")
