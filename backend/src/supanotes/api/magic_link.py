"""Magic link request endpoint (called with fetch from the login page)."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from ..core.schemas.auth import EmailForm
from ..core.services import AuthService
from .deps import get_auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


@router.get("/send-magic-link")
async def send_magic_link_page():
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/send-magic-link")
async def send_magic_link(request: Request, auth_service: AuthService = Depends(get_auth_service)):
    form = await request.form()
    try:
        email_form = EmailForm.model_validate({"email": form.get("email") or ""})
    except ValidationError:
        return JSONResponse({"error": "invalid-email"}, status_code=status.HTTP_400_BAD_REQUEST)

    result = await auth_service.send_magic_link(email_form.email)
    if result.error:
        logger.error(f"Magic link not sent: {result.error}")
        return JSONResponse(
            {"error": "unable-to-send-magic-link"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return {"error": None}
