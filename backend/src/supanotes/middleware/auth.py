"""Authentication guard for protected routes.

``require_auth_session`` is the dependency every ``/notes`` handler starts
with. It reads the session cookie, refreshes tokens that are about to
expire, and otherwise sends the browser to ``/login`` with the original
path kept as ``redirectTo``.

A refreshed session has to reach the browser whatever the handler returns,
so the dependency parks it on ``request.state`` and ``AuthSessionMiddleware``
adds the ``Set-Cookie`` header on the way out.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import Depends, HTTPException, Request, status
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.schemas.auth import AuthSession
from ..core.services.auth_service import AuthService
from ..i18n import N_
from ..integrations.supabase import (
    AuthProviderError,
    SupabaseAuthClient,
    get_supabase_admin,
    get_supabase_client,
)
from ..security import (
    commit_auth_session,
    get_auth_session,
    get_user_id_from_token,
    is_session_expiring,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
REFRESHED_SESSION_STATE = "refreshed_auth_session"
PRIVATE_RESPONSE_STATE = "private_response"
AUTH_UNAVAILABLE = N_("Sign-in is temporarily unavailable, please try again")


class AuthRedirect(Exception):
    """Raised by the guard; turned into a redirect to the login page."""

    def __init__(self, location: str, clear_cookie: bool = False):
        super().__init__(location)
        self.location = location
        self.clear_cookie = clear_cookie


def login_redirect_url(request: Request) -> str:
    """``/login?redirectTo=<path and query of this request>``."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return f"{LOGIN_PATH}?{urlencode({'redirectTo': target})}"


async def require_auth_session(
    request: Request,
    client: SupabaseAuthClient = Depends(get_supabase_client),
    admin: SupabaseAuthClient = Depends(get_supabase_admin),
) -> AuthSession:
    """Current session or AuthRedirect."""
    request.state.private_response = True

    auth_session: Optional[AuthSession] = get_auth_session(request)
    had_cookie = auth_session is not None

    refreshed = False
    if auth_session and is_session_expiring(auth_session):
        logger.debug(f"Refreshing access token for user {auth_session.user_id}")
        try:
            auth_session = await AuthService(client, admin).refresh_access_token(
                auth_session.refresh_token
            )
            refreshed = True
        except AuthProviderError as e:
            # an outage is not a revoked session: the cookie stays as it is
            if is_session_expiring(auth_session, threshold_seconds=0):
                logger.error(f"Session expired and the auth provider is unavailable: {e.message}")
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail=AUTH_UNAVAILABLE,
                ) from e
            logger.warning(f"Token refresh postponed, auth provider unavailable: {e.message}")

        if refreshed and auth_session:
            request.state.refreshed_auth_session = auth_session

    if (
        auth_session
        and not refreshed
        and get_user_id_from_token(auth_session.access_token) != auth_session.user_id
    ):
        logger.warning("Session cookie carries an access token for another identity")
        auth_session = None

    if not auth_session:
        raise AuthRedirect(login_redirect_url(request), clear_cookie=had_cookie)

    return auth_session


class AuthSessionMiddleware:
    """Adds the refreshed session cookie and no-store caching to guarded responses."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                if state.get(PRIVATE_RESPONSE_STATE):
                    headers["Cache-Control"] = "no-store"
                refreshed = state.get(REFRESHED_SESSION_STATE)
                if refreshed is not None:
                    headers.append(
                        "set-cookie",
                        commit_auth_session(Request(scope), auth_session=refreshed),
                    )
            await send(message)

        await self.app(scope, receive, send_wrapper)
