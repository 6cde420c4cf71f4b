"""Page and action routers for SupaNotes."""

from .auth import router as auth_router
from .health import router as health_router
from .magic_link import router as magic_link_router
from .notes import router as notes_router
from .oauth import router as oauth_router

__all__ = ["auth_router", "oauth_router", "magic_link_router", "notes_router", "health_router"]
