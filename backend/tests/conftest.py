"""Shared pytest fixtures: SQLite in-memory database and an in-memory auth provider.

The auth provider is faked at the HTTP level with ``httpx.MockTransport`` so
the real ``SupabaseAuthClient`` request/response code runs in every test.
"""

import json
import logging
import os
import time
from uuid import UUID, uuid4

# Settings are read at import time, so the environment has to be ready first
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-1234")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SERVER_URL", "http://testserver")
os.environ["SUPANOTES_SKIP_LIFESPAN_DB"] = "1"

import httpx  # noqa: E402
import pytest  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from supanotes import support  # noqa: E402
from supanotes.config import get_settings  # noqa: E402
from supanotes.core.models.base import BaseModel  # noqa: E402
from supanotes.core.services import AuthService  # noqa: E402
from supanotes.database import get_db_session  # noqa: E402
from supanotes.integrations.supabase import (  # noqa: E402
    SupabaseAuthClient,
    get_supabase_admin,
    get_supabase_client,
)
from supanotes.main import app as fastapi_app  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_PASSWORD = "correct-horse-battery"


def make_access_token(user_id, email: str, expires_in: int = 3600, **claims) -> str:
    """Access token signed like the provider signs them."""
    payload = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(
        payload, get_settings().supabase_jwt_secret.get_secret_value(), algorithm="HS256"
    )


class FakeSupabase:
    """In-memory GoTrue: accounts, refresh tokens and sent emails."""

    def __init__(self):
        self.accounts: dict[str, dict] = {}  # email -> {"id", "email", "password"}
        self.refresh_tokens: dict[str, str] = {}  # token -> email
        self.magic_links: list[dict] = []
        self.reset_emails: list[dict] = []
        self.calls: list[tuple[str, str]] = []
        self.expires_in = 3600
        self.down = False
        self.fail_otp = False
        self.fail_password_grant = False
        self.token_outage = False

    # helpers for tests

    def add_account(self, email: str, password: str = TEST_PASSWORD) -> UUID:
        user_id = uuid4()
        self.accounts[email] = {"id": user_id, "email": email, "password": password}
        return user_id

    def issue_refresh_token(self, email: str) -> str:
        token = f"rt-{uuid4().hex}"
        self.refresh_tokens[token] = email
        return token

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    # transport

    def _session(self, account: dict) -> dict:
        now = int(time.time())
        return {
            "access_token": make_access_token(account["id"], account["email"], self.expires_in),
            "token_type": "bearer",
            "expires_in": self.expires_in,
            "expires_at": now + self.expires_in,
            "refresh_token": self.issue_refresh_token(account["email"]),
            "user": {"id": str(account["id"]), "email": account["email"], "aud": "authenticated"},
        }

    def _account_by_id(self, user_id: str):
        for account in self.accounts.values():
            if str(account["id"]) == user_id:
                return account
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path.removeprefix("/auth/v1")
        self.calls.append((request.method, path))
        body = json.loads(request.content) if request.content else {}
        is_admin = request.headers.get("apikey") == "test-service-role-key"

        if path == "/health":
            return httpx.Response(200, json={"name": "GoTrue", "version": "test"})

        if path == "/token":
            if self.token_outage:
                return httpx.Response(503, json={"msg": "Service Unavailable"})
            grant_type = request.url.params.get("grant_type")
            if grant_type == "password":
                account = self.accounts.get(body.get("email"))
                if self.fail_password_grant or not account or account["password"] != body.get("password"):
                    return httpx.Response(
                        400,
                        json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
                    )
                return httpx.Response(200, json=self._session(account))
            if grant_type == "refresh_token":
                # refresh tokens are single use
                email = self.refresh_tokens.pop(body.get("refresh_token"), None)
                if not email or email not in self.accounts:
                    return httpx.Response(
                        400,
                        json={"error": "invalid_grant", "error_description": "Invalid Refresh Token"},
                    )
                return httpx.Response(200, json=self._session(self.accounts[email]))

        if path == "/otp":
            if self.fail_otp:
                return httpx.Response(500, json={"msg": "Error sending magic link email"})
            self.magic_links.append(
                {"email": body["email"], "redirect_to": request.url.params.get("redirect_to")}
            )
            return httpx.Response(200, json={})

        if path == "/recover":
            self.reset_emails.append(
                {"email": body["email"], "redirect_to": request.url.params.get("redirect_to")}
            )
            return httpx.Response(200, json={})

        if path.startswith("/admin/users"):
            if not is_admin:
                return httpx.Response(401, json={"msg": "User not allowed"})

            if path == "/admin/users" and request.method == "POST":
                if body["email"] in self.accounts:
                    return httpx.Response(
                        422, json={"msg": "A user with this email address has already been registered"}
                    )
                user_id = self.add_account(body["email"], body["password"])
                return httpx.Response(200, json={"id": str(user_id), "email": body["email"]})

            account = self._account_by_id(path.rsplit("/", 1)[-1])
            if not account:
                return httpx.Response(404, json={"msg": "User not found"})
            if request.method == "PUT":
                account.update({k: v for k, v in body.items() if k == "password"})
                return httpx.Response(200, json={"id": str(account["id"]), "email": account["email"]})
            if request.method == "DELETE":
                del self.accounts[account["email"]]
                return httpx.Response(200, content=b"")

        return httpx.Response(404, json={"msg": f"no route for {request.method} {path}"})


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def supabase_client(fake_supabase):
    settings = get_settings()
    return SupabaseAuthClient(
        settings.supabase_url,
        settings.supabase_anon_key,
        transport=httpx.MockTransport(fake_supabase.handler),
    )


@pytest.fixture
def supabase_admin(fake_supabase):
    settings = get_settings()
    return SupabaseAuthClient(
        settings.supabase_url,
        settings.supabase_service_role_key.get_secret_value(),
        transport=httpx.MockTransport(fake_supabase.handler),
    )


@pytest.fixture
def auth_service(supabase_client, supabase_admin):
    return AuthService(supabase_client, supabase_admin)


@pytest.fixture
async def test_engine():
    """Fresh SQLite in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces ON DELETE CASCADE with this pragma
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_app(session_factory, supabase_client, supabase_admin):
    """The app with database and provider dependencies overridden."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db_session] = _override_get_db
    fastapi_app.dependency_overrides[get_supabase_client] = lambda: supabase_client
    fastapi_app.dependency_overrides[get_supabase_admin] = lambda: supabase_admin
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """Async client sharing the test's event loop; cookies persist between requests."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


def new_test_email() -> str:
    return f"user-{uuid4().hex[:10]}@example.com"


@pytest.fixture
async def user(test_session, auth_service):
    """A registered account with its row; removed again after the test."""
    account = await support.create_account(
        test_session, auth_service, new_test_email(), TEST_PASSWORD
    )
    account["id"] = await support.get_user_id(test_session, account["email"])
    yield account
    await support.delete_user(test_session, auth_service, account["email"])


@pytest.fixture
async def other_user(test_session, auth_service):
    account = await support.create_account(
        test_session, auth_service, new_test_email(), TEST_PASSWORD
    )
    account["id"] = await support.get_user_id(test_session, account["email"])
    yield account
    await support.delete_user(test_session, auth_service, account["email"])


@pytest.fixture
def login_as():
    """Sign a client in through the login form."""

    async def _login(client: httpx.AsyncClient, account: dict) -> httpx.Response:
        response = await client.post(
            "/login", data={"email": account["email"], "password": account["password"]}
        )
        assert response.status_code == 303, response.text
        return response

    return _login


@pytest.fixture
async def logged_in_client(client, user, login_as):
    await login_as(client, user)
    return client


@pytest.fixture
def token_factory():
    return make_access_token
