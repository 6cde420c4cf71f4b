"""Middleware and dependencies for authentication and other cross-cutting concerns."""

from .auth import AuthRedirect, AuthSessionMiddleware, require_auth_session

__all__ = ["AuthRedirect", "AuthSessionMiddleware", "require_auth_session"]
