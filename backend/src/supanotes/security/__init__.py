"""Security utilities: session cookie codec and provider token checks."""

from .jwt import decode_access_token, get_user_id_from_token
from .session import (
    commit_auth_session,
    destroy_auth_session,
    get_auth_session,
    is_session_expiring,
)

__all__ = [
    "decode_access_token",
    "get_user_id_from_token",
    "get_auth_session",
    "commit_auth_session",
    "destroy_auth_session",
    "is_session_expiring",
]
