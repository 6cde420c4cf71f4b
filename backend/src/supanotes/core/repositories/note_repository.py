"""Note repository for database operations.

Every read and write takes the owner's id and filters on it, so a caller can
never reach a row that belongs to someone else.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note

logger = logging.getLogger(__name__)


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Create new note."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.commit()
        await self.session.refresh(note)
        return note

    async def get_by_id_and_user(self, note_id: UUID, user_id: UUID) -> Optional[Note]:
        """Get note by ID if owned by user."""
        stmt = select(Note).where(and_(Note.id == note_id, Note.user_id == user_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_note(self, note_id: UUID, user_id: UUID, update_data: dict) -> Optional[Note]:
        """Update note if owned by user."""
        note = await self.get_by_id_and_user(note_id, user_id)
        if not note:
            return None

        for key, value in update_data.items():
            setattr(note, key, value)

        await self.session.commit()
        await self.session.refresh(note)
        return note

    async def delete_note(self, note_id: UUID, user_id: UUID) -> bool:
        """Delete note if owned by user."""
        stmt = delete(Note).where(and_(Note.id == note_id, Note.user_id == user_id))
        result = await self.session.execute(stmt)
        await self.session.commit()

        if result.rowcount == 0:
            logger.warning(f"Note {note_id} not found or not owned by user {user_id}")
            return False
        return True

    async def list_user_notes(self, user_id: UUID) -> List[Note]:
        """Notes owned by user, most recently updated first."""
        stmt = (
            select(Note)
            .where(Note.user_id == user_id)
            .order_by(desc(Note.updated_at), desc(Note.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
