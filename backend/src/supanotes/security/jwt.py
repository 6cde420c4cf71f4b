"""Verification of access tokens issued by the auth provider."""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import get_settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ALGORITHM = "HS256"
ACCESS_TOKEN_AUDIENCE = "authenticated"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify signature, expiry and audience of a provider access token."""
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret.get_secret_value(),
            algorithms=[ACCESS_TOKEN_ALGORITHM],
            audience=ACCESS_TOKEN_AUDIENCE,
        )
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        return None


def get_user_id_from_token(token: str) -> Optional[UUID]:
    """Extract the auth user id (``sub``) from a valid token."""
    payload = decode_access_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    try:
        return UUID(user_id)
    except ValueError:
        return None
