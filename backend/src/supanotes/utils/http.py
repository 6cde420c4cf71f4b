"""HTTP helpers."""

from typing import Optional

from fastapi import HTTPException, Request, status

from ..i18n import N_

DEFAULT_REDIRECT = "/"


def assert_is_post(request: Request) -> None:
    """Actions only answer POST; anything else is a 405."""
    if request.method != "POST":
        raise HTTPException(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail=N_("Method not allowed"),
            headers={"Allow": "POST"},
        )


def safe_redirect(to: Optional[str], default: str = DEFAULT_REDIRECT) -> str:
    """Only follow local paths, never another origin.

    ``//evil.com`` and ``/\\evil.com`` are protocol-relative in browsers, so
    they are rejected along with absolute URLs.
    """
    if not to or not isinstance(to, str):
        return default
    to = to.strip()
    if not to.startswith("/") or to.startswith("//") or to.startswith("/\\"):
        return default
    return to
