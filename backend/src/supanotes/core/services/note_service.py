"""Note service implementation."""

from typing import List
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...i18n import N_
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteCreate, NoteListItem, NoteResponse, NoteUpdate
from .interfaces import INoteService

NOTE_NOT_FOUND = N_("Note not found")


def _not_found() -> HTTPException:
    # same answer for "missing" and "someone else's", so existence never leaks
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOTE_NOT_FOUND)


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)

    async def list_user_notes(self, user_id: UUID) -> List[NoteListItem]:
        """Titles of the user's notes, newest first."""
        notes = await self.note_repo.list_user_notes(user_id)
        return [NoteListItem.model_validate(note) for note in notes]

    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        note = await self.note_repo.get_by_id_and_user(note_id, user_id)
        if not note:
            raise _not_found()
        return NoteResponse.model_validate(note)

    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        note = await self.note_repo.create_note(
            {"title": request.title, "body": request.body, "user_id": user_id}
        )
        return NoteResponse.model_validate(note)

    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        note = await self.note_repo.update_note(
            note_id, user_id, {"title": request.title, "body": request.body}
        )
        if not note:
            raise _not_found()
        return NoteResponse.model_validate(note)

    async def delete_note(self, note_id: UUID, user_id: UUID) -> None:
        if not await self.note_repo.delete_note(note_id, user_id):
            raise _not_found()
