"""Notes pages. Every route here sits behind ``require_auth_session``."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from ..core.schemas.auth import AuthSession
from ..core.schemas.common import field_errors
from ..core.schemas.notes import NOTE_FORM_MESSAGES, NOTE_FORM_OVERRIDES, NoteCreate, NoteUpdate
from ..core.services import NoteService
from ..core.services.note_service import NOTE_NOT_FOUND
from ..middleware.auth import require_auth_session
from ..templating import render
from .deps import get_note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _parse_note_id(note_id: str) -> UUID:
    # a malformed id can't name a note, so it gets the same 404 as a missing one
    try:
        return UUID(note_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOTE_NOT_FOUND) from None


async def _note_form(request: Request) -> dict:
    form = await request.form()
    return {"title": str(form.get("title") or ""), "body": str(form.get("body") or "")}


async def _render_notes(
    request: Request,
    name: str,
    auth_session: AuthSession,
    note_service: NoteService,
    status_code: int = 200,
    **context,
):
    """Notes pages share a layout that lists the user's notes."""
    notes = await note_service.list_user_notes(auth_session.user_id)
    return render(
        request,
        name,
        {"auth_session": auth_session, "notes": notes, **context},
        status_code=status_code,
    )


@router.get("")
async def list_notes(
    request: Request,
    auth_session: AuthSession = Depends(require_auth_session),
    note_service: NoteService = Depends(get_note_service),
):
    return await _render_notes(request, "notes/index.html", auth_session, note_service)


@router.get("/new")
async def new_note_page(
    request: Request,
    auth_session: AuthSession = Depends(require_auth_session),
    note_service: NoteService = Depends(get_note_service),
):
    return await _render_notes(request, "notes/new.html", auth_session, note_service)


@router.post("/new")
async def create_note(
    request: Request,
    auth_session: AuthSession = Depends(require_auth_session),
    note_service: NoteService = Depends(get_note_service),
):
    """Create a note and open it."""
    values = await _note_form(request)
    try:
        note_data = NoteCreate.model_validate(values)
    except ValidationError as e:
        return await _render_notes(
            request,
            "notes/new.html",
            auth_session,
            note_service,
            status_code=status.HTTP_400_BAD_REQUEST,
            values=values,
            errors=field_errors(e, NOTE_FORM_MESSAGES, NOTE_FORM_OVERRIDES),
        )

    note = await note_service.create_note(auth_session.user_id, note_data)
    logger.info(f"User {auth_session.user_id} created note {note.id}")
    return RedirectResponse(f"/notes/{note.id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{note_id}")
async def note_detail(
    request: Request,
    note_id: str,
    auth_session: AuthSession = Depends(require_auth_session),
    note_service: NoteService = Depends(get_note_service),
):
    note = await note_service.get_note(_parse_note_id(note_id), auth_session.user_id)
    return await _render_notes(request, "notes/detail.html", auth_session, note_service, note=note)


@router.post("/{note_id}")
async def delete_note(
    note_id: str,
    auth_session: AuthSession = Depends(require_auth_session),
    note_service: NoteService = Depends(get_note_service),
):
    """The detail page's delete button posts here."""
    parsed_id = _parse_note_id(note_id)
    await note_service.delete_note(parsed_id, auth_session.user_id)
    logger.info(f"User {auth_session.user_id} deleted note {parsed_id}")
    return RedirectResponse("/notes", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{note_id}/edit")
async def edit_note_page(
    request: Request,
    note_id: str,
    auth_session: AuthSession = Depends(require_auth_session),
    note_service: NoteService = Depends(get_note_service),
):
    note = await note_service.get_note(_parse_note_id(note_id), auth_session.user_id)
    return await _render_notes(
        request,
        "notes/edit.html",
        auth_session,
        note_service,
        note=note,
        values={"title": note.title, "body": note.body},
    )


@router.post("/{note_id}/edit")
async def update_note(
    request: Request,
    note_id: str,
    auth_session: AuthSession = Depends(require_auth_session),
    note_service: NoteService = Depends(get_note_service),
):
    parsed_id = _parse_note_id(note_id)
    values = await _note_form(request)
    try:
        note_data = NoteUpdate.model_validate(values)
    except ValidationError as e:
        # ownership first, so a stranger's id is a 404 even with a bad form
        note = await note_service.get_note(parsed_id, auth_session.user_id)
        return await _render_notes(
            request,
            "notes/edit.html",
            auth_session,
            note_service,
            status_code=status.HTTP_400_BAD_REQUEST,
            note=note,
            values=values,
            errors=field_errors(e, NOTE_FORM_MESSAGES, NOTE_FORM_OVERRIDES),
        )

    note = await note_service.update_note(parsed_id, auth_session.user_id, note_data)
    return RedirectResponse(f"/notes/{note.id}", status_code=status.HTTP_303_SEE_OTHER)
