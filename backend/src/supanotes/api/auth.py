"""Authentication pages: landing, login, join, password reset, logout."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from ..core.schemas.auth import EmailForm, EmailPasswordForm, ResetPasswordForm
from ..core.schemas.common import field_errors
from ..core.services import AuthService, UserService
from ..i18n import N_
from ..integrations.supabase import AuthProviderError
from ..security import commit_auth_session, destroy_auth_session, get_auth_session
from ..templating import render
from ..utils.http import assert_is_post, safe_redirect
from .deps import get_auth_service, get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])

NOTES_PATH = "/notes"

LOGIN_MESSAGES = {
    "email": N_("Email is invalid"),
    "password": N_("Password is too short"),
}
LOGIN_MESSAGE_OVERRIDES = {
    ("password", "string_too_long"): N_("Password is too long"),
}
INVALID_CREDENTIALS = N_("Invalid email or password")
JOIN_EMAIL_UNAVAILABLE = N_("Unable to create an account with this email")
JOIN_FAILED = N_("Something went wrong while creating your account, please try again")
AUTH_UNAVAILABLE = N_("Something went wrong, please try again")
RESET_LINK_INVALID = N_("This reset link is invalid or has expired")
PASSWORDS_DO_NOT_MATCH = N_("Passwords do not match")
PASSWORD_UPDATE_FAILED = N_("Unable to update your password, please try again")


def _redirect(location: str, cookie: Optional[str] = None) -> RedirectResponse:
    headers = {"Set-Cookie": cookie} if cookie else None
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER, headers=headers)


async def _email_password_form(request: Request) -> tuple[dict, Optional[EmailPasswordForm], dict]:
    """Parse and validate a login/join post; returns (values, form, errors)."""
    form = await request.form()
    values = {
        "email": str(form.get("email") or ""),
        "password": str(form.get("password") or ""),
        "redirectTo": form.get("redirectTo") or None,
    }
    try:
        return values, EmailPasswordForm.model_validate(values), {}
    except ValidationError as e:
        return values, None, field_errors(e, LOGIN_MESSAGES, LOGIN_MESSAGE_OVERRIDES)


@router.get("/")
async def index(request: Request):
    """Landing page."""
    return render(request, "index.html", {"auth_session": get_auth_session(request)})


@router.get("/login")
async def login_page(request: Request, redirectTo: Optional[str] = None):
    if get_auth_session(request):
        return _redirect(NOTES_PATH)
    return render(request, "login.html", {"redirect_to": safe_redirect(redirectTo, NOTES_PATH)})


@router.post("/login")
async def login(request: Request, auth_service: AuthService = Depends(get_auth_service)):
    """Password sign-in."""
    values, form, errors = await _email_password_form(request)
    redirect_to = safe_redirect(values["redirectTo"], NOTES_PATH)
    context = {"values": values, "redirect_to": redirect_to}

    if form is None:
        return render(request, "login.html", {**context, "errors": errors}, status_code=400)

    try:
        auth_session = await auth_service.sign_in_with_email(form.email, form.password)
    except AuthProviderError as e:
        logger.error(f"Password sign-in failed, auth provider unavailable: {e.message}")
        return render(
            request, "login.html", {**context, "errors": {"form": AUTH_UNAVAILABLE}}, status_code=500
        )
    if not auth_session:
        return render(
            request,
            "login.html",
            {**context, "errors": {"email": INVALID_CREDENTIALS}},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    logger.info(f"User {auth_session.user_id} signed in with password")
    return _redirect(redirect_to, commit_auth_session(request, auth_session=auth_session))


@router.get("/join")
async def join_page(request: Request, redirectTo: Optional[str] = None):
    if get_auth_session(request):
        return _redirect(NOTES_PATH)
    return render(request, "join.html", {"redirect_to": safe_redirect(redirectTo, NOTES_PATH)})


@router.post("/join")
async def join(request: Request, user_service: UserService = Depends(get_user_service)):
    """Create an auth account and its user row, then sign in."""
    values, form, errors = await _email_password_form(request)
    redirect_to = safe_redirect(values["redirectTo"], NOTES_PATH)
    context = {"values": values, "redirect_to": redirect_to}

    if form is None:
        return render(request, "join.html", {**context, "errors": errors}, status_code=400)

    if await user_service.get_user_by_email(form.email):
        return render(
            request, "join.html", {**context, "errors": {"email": JOIN_EMAIL_UNAVAILABLE}}, 400
        )

    try:
        auth_session = await user_service.create_user_account(form.email, form.password)
    except AuthProviderError as e:
        # an account that exists upstream but has no row lands here as well
        logger.warning(f"Auth account creation refused ({e.status_code}): {e.message}")
        if e.status_code and 400 <= e.status_code < 500:
            return render(
                request, "join.html", {**context, "errors": {"email": JOIN_EMAIL_UNAVAILABLE}}, 400
            )
        return render(request, "join.html", {**context, "errors": {"form": JOIN_FAILED}}, 500)

    if not auth_session:
        return render(request, "join.html", {**context, "errors": {"form": JOIN_FAILED}}, 500)

    logger.info(f"Created account for user {auth_session.user_id}")
    return _redirect(redirect_to, commit_auth_session(request, auth_session=auth_session))


@router.get("/forgot-password")
async def forgot_password_page(request: Request):
    if get_auth_session(request):
        return _redirect(NOTES_PATH)
    return render(request, "forgot_password.html")


@router.post("/forgot-password")
async def forgot_password(request: Request, auth_service: AuthService = Depends(get_auth_service)):
    """Send a reset link. The answer is the same whether or not the account exists."""
    form = await request.form()
    values = {"email": str(form.get("email") or "")}
    try:
        email_form = EmailForm.model_validate(values)
    except ValidationError as e:
        return render(
            request,
            "forgot_password.html",
            {"values": values, "errors": field_errors(e, LOGIN_MESSAGES, LOGIN_MESSAGE_OVERRIDES)},
            status_code=400,
        )

    await auth_service.send_reset_password_link(email_form.email)
    return render(request, "forgot_password.html", {"sent": True})


@router.get("/reset-password")
async def reset_password_page(request: Request):
    return render(request, "reset_password.html")


@router.post("/reset-password")
async def reset_password(request: Request, auth_service: AuthService = Depends(get_auth_service)):
    """Set a new password using the recovery session from the reset email."""
    form = await request.form()
    try:
        reset = ResetPasswordForm.model_validate(dict(form))
    except ValidationError as e:
        if not form.get("refreshToken"):
            errors = {"form": RESET_LINK_INVALID}
        else:
            errors = field_errors(
                e, {"password": LOGIN_MESSAGES["password"]}, LOGIN_MESSAGE_OVERRIDES
            ) or {"confirmPassword": PASSWORDS_DO_NOT_MATCH}
        return render(request, "reset_password.html", {"errors": errors}, status_code=400)

    try:
        auth_session = await auth_service.refresh_access_token(reset.refresh_token)
    except AuthProviderError as e:
        logger.error(f"Recovery token exchange failed, auth provider unavailable: {e.message}")
        return render(
            request, "reset_password.html", {"errors": {"form": AUTH_UNAVAILABLE}}, status_code=500
        )
    if not auth_session:
        return render(
            request,
            "reset_password.html",
            {"errors": {"form": RESET_LINK_INVALID}},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        await auth_service.update_account_password(auth_session.user_id, reset.password)
    except AuthProviderError as e:
        logger.error(f"Password update failed for {auth_session.user_id}: {e.message}")
        return render(
            request,
            "reset_password.html",
            {"errors": {"form": PASSWORD_UPDATE_FAILED}},
            status_code=500,
        )

    return _redirect(NOTES_PATH, commit_auth_session(request, auth_session=auth_session))


@router.get("/logout")
async def logout_page():
    return _redirect("/")


@router.api_route("/logout", methods=["POST", "PUT", "PATCH", "DELETE"])
async def logout(request: Request):
    """Clear the session cookie."""
    assert_is_post(request)
    return destroy_auth_session(request)
