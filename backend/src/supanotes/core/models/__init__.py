"""
Database models for SupaNotes.

SQLAlchemy ORM models for the rows the app owns in the Supabase postgres
database. Auth accounts themselves live in the provider's auth schema; a
User row mirrors one of them by id.

Models included:
    - User: app-side profile keyed by the auth provider's user id
    - Note: note content owned by exactly one user
"""

from .base import BaseModel
from .note import Note
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
]
