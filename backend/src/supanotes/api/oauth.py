"""OAuth / magic link callback.

The provider sends the browser back with tokens in the URL fragment. The
callback page hands only the refresh token to ``POST /oauth/callback``;
the server exchanges it and takes the identity from the provider's answer,
never from anything else the browser sends.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from ..core.schemas.auth import OAuthCallbackRequest
from ..core.services import AuthService, UserService
from ..integrations.supabase import AuthProviderError
from ..security import commit_auth_session, get_auth_session
from ..templating import render
from ..utils.http import safe_redirect
from .deps import get_auth_service, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["authentication"])


@router.get("/callback")
async def oauth_callback_page(request: Request, redirectTo: Optional[str] = None):
    if get_auth_session(request):
        return RedirectResponse("/notes", status_code=status.HTTP_303_SEE_OTHER)
    return render(request, "oauth_callback.html", {"redirect_to": safe_redirect(redirectTo, "/notes")})


@router.post("/callback")
async def oauth_callback(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
    user_service: UserService = Depends(get_user_service),
):
    form = await request.form()
    try:
        callback = OAuthCallbackRequest.model_validate(dict(form))
    except ValidationError:
        return JSONResponse({"message": "invalid-request"}, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        auth_session = await auth_service.refresh_access_token(callback.refresh_token)
    except AuthProviderError as e:
        logger.error(f"Auth provider unavailable during callback: {e.message}")
        return JSONResponse(
            {"message": "auth-provider-unavailable"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    if not auth_session:
        return JSONResponse(
            {"message": "invalid-refresh-token"}, status_code=status.HTTP_401_UNAUTHORIZED
        )

    # first sign-in through a provider: the account exists upstream but has no row yet
    user = await user_service.get_user_by_id(auth_session.user_id)
    if not user:
        user = await user_service.try_create_user(auth_session.user_id, auth_session.email)
        if not user:
            return JSONResponse(
                {"message": "create-user-error"},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        logger.info(f"Created user row for {auth_session.user_id} on first provider sign-in")

    return RedirectResponse(
        safe_redirect(callback.redirect_to, "/notes"),
        status_code=status.HTTP_303_SEE_OTHER,
        headers={"Set-Cookie": commit_auth_session(request, auth_session=auth_session)},
    )
