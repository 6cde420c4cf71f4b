"""
Note schemas for the create / edit forms and page rendering.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...i18n import N_

NOTE_FORM_MESSAGES = {
    "title": N_("Title is required"),
    "body": N_("Body is required"),
}
NOTE_FORM_OVERRIDES = {
    ("title", "string_too_long"): N_("Title is too long"),
}
NOTE_TITLE_MAX_LENGTH = 200


class NoteCreate(BaseModel):
    """Note creation form."""

    title: str = Field(min_length=1, max_length=NOTE_TITLE_MAX_LENGTH)
    body: str = Field(min_length=1)

    @field_validator("title", "body")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class NoteUpdate(NoteCreate):
    """Note edit form, both fields are resubmitted."""


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    body: str
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class NoteListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
