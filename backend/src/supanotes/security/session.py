"""
Auth session cookie.

The whole session lives in one cookie: the provider's token bundle
serialised as JSON and sealed with Fernet (AES + HMAC), so the browser can
neither read nor alter it. There is no server side session store.

A cookie that is missing, tampered with, older than the max age or not a
valid ``AuthSession`` reads as "no session"; nothing here raises on bad input.
"""

import base64
import hashlib
import logging
import time
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from fastapi import Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..core.schemas.auth import AuthSession

logger = logging.getLogger(__name__)


def _cipher(settings: Settings) -> Fernet:
    # Fernet wants 32 url-safe base64 bytes; derive them from the configured secret
    secret = settings.session_secret.get_secret_value().encode()
    return Fernet(base64.urlsafe_b64encode(hashlib.sha256(secret).digest()))


def encode_auth_session(auth_session: AuthSession, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return _cipher(settings).encrypt(auth_session.model_dump_json().encode()).decode()


def decode_auth_session(value: str, settings: Optional[Settings] = None) -> Optional[AuthSession]:
    settings = settings or get_settings()
    try:
        payload = _cipher(settings).decrypt(value.encode(), ttl=settings.session_max_age_seconds)
    except (InvalidToken, ValueError):
        logger.info("Discarding unreadable auth session cookie")
        return None

    try:
        return AuthSession.model_validate_json(payload)
    except ValidationError:
        logger.warning("Discarding auth session cookie with unexpected shape")
        return None


def get_auth_session(request: Request) -> Optional[AuthSession]:
    """Read the session from the request cookie, or None."""
    settings = get_settings()
    value = request.cookies.get(settings.session_cookie_name)
    if not value:
        return None
    return decode_auth_session(value, settings)


def commit_auth_session(request: Request, *, auth_session: AuthSession) -> str:
    """Serialise ``auth_session`` and return the ``Set-Cookie`` header value."""
    settings = get_settings()
    carrier = Response()
    carrier.set_cookie(
        settings.session_cookie_name,
        encode_auth_session(auth_session, settings),
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production or request.url.scheme == "https",
    )
    return carrier.headers["set-cookie"]


def destroy_auth_session(request: Request) -> RedirectResponse:
    """Redirect home and clear the cookie."""
    settings = get_settings()
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production or request.url.scheme == "https",
    )
    return response


def is_session_expiring(auth_session: AuthSession, threshold_seconds: Optional[int] = None) -> bool:
    """True when the access token expires within the refresh threshold."""
    if threshold_seconds is None:
        threshold_seconds = get_settings().refresh_threshold_seconds
    return auth_session.expires_at - threshold_seconds <= int(time.time())
