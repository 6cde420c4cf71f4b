"""NoteRepository on SQLite: every query is filtered by owner."""

import uuid

from supanotes.core.repositories.note_repository import NoteRepository


async def test_update_and_delete_require_ownership(test_session, user, other_user):
    repo = NoteRepository(test_session)
    note = await repo.create_note({"title": "T", "body": "B", "user_id": user["id"]})

    assert await repo.get_by_id_and_user(note.id, other_user["id"]) is None
    assert await repo.update_note(note.id, other_user["id"], {"title": "hijacked"}) is None
    assert await repo.delete_note(note.id, other_user["id"]) is False

    assert (await repo.get_by_id_and_user(note.id, user["id"])).title == "T"
    assert await repo.delete_note(note.id, user["id"]) is True


async def test_list_user_notes_only_returns_own(test_session, user, other_user):
    repo = NoteRepository(test_session)
    await repo.create_note({"title": "Mine", "body": "B", "user_id": user["id"]})
    await repo.create_note({"title": "Theirs", "body": "B", "user_id": other_user["id"]})

    assert [n.title for n in await repo.list_user_notes(user["id"])] == ["Mine"]
    assert await repo.list_user_notes(uuid.uuid4()) == []
