"""Small request/response helpers shared by the route handlers."""

from .http import assert_is_post, safe_redirect

__all__ = ["assert_is_post", "safe_redirect"]
