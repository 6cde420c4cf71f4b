# Note model for user content
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .user import User


class Note(BaseModel):
    """A note, owned by exactly one user."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)

    # owner reference, rows go away with the user
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="notes", lazy="noload")

    __table_args__ = (
        Index("idx_notes_user_id", "user_id"),
        Index("idx_notes_user_updated", "user_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(title='{self.title}')>"
