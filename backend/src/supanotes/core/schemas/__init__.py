"""
Pydantic schemas for validating form input and describing responses.

Auth schemas cover the cookie-carried session and the sign-in forms, note
schemas the CRUD forms, common schemas the health payload and the helper that
turns validation errors into per-field messages.
"""

from .auth import (
    AuthAccount,
    AuthSession,
    EmailForm,
    EmailPasswordForm,
    MagicLinkResult,
    OAuthCallbackRequest,
    ResetPasswordForm,
)
from .common import HealthCheckResponse, field_errors
from .notes import NoteCreate, NoteListItem, NoteResponse, NoteUpdate

__all__ = [
    # Auth schemas
    "AuthSession",
    "AuthAccount",
    "EmailForm",
    "EmailPasswordForm",
    "MagicLinkResult",
    "OAuthCallbackRequest",
    "ResetPasswordForm",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListItem",
    # Common schemas
    "HealthCheckResponse",
    "field_errors",
]
