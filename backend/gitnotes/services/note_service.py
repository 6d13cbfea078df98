"""Note submission and retrieval on top of NotesStore and TransformClient."""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from gitnotes.errors import (
    AuthorizationError,
    NoteNotFoundError,
    ReadForbiddenError,
    ValidationError,
)
from gitnotes.storage.note_codec import DEFAULT_TITLE
from gitnotes.storage.notes_store import Note, NotesStore
from gitnotes.utils.shared_secret import verify_note_secret
from gitnotes.utils.transform_client import TransformClient

logger = logging.getLogger(__name__)

SORT_ORDERS = ("desc", "asc")


class NoteService:
    def __init__(self, store: NotesStore, transformer: TransformClient, note_password: str):
        self.store = store
        self.transformer = transformer
        self.note_password = note_password

    async def submit(self, raw_title: Optional[str], raw_content: Optional[str], supplied_secret: Optional[str]) -> str:
        """
        Validate, transform and store a new note. Returns its id.

        Transformation failures fall back to the submitted text; storage
        failures propagate.
        """
        if not verify_note_secret(supplied_secret, self.note_password):
            logger.info("Note rejected: wrong password")
            raise AuthorizationError("Unauthorized")

        content = raw_content or ""
        if not content.strip():
            raise ValidationError("Content is required")

        title = (raw_title or "").strip() or DEFAULT_TITLE

        title = await self.transformer.filter_text(title)
        content = await self.transformer.filter_text(content)
        content = await self.transformer.obfuscate(content)

        note_id = str(uuid.uuid4())
        await self.store.create_note(note_id, title, content)
        logger.info("Stored note %s", note_id)
        return note_id

    async def list_notes(self, sort: str = "desc") -> list[Note]:
        if sort not in SORT_ORDERS:
            raise ValidationError(f"sort must be one of {', '.join(SORT_ORDERS)}")
        notes = await self.store.list_notes()
        # created_at is fetch time, so this only orders within one response
        return sorted(notes, key=lambda n: n.created_at, reverse=(sort == "desc"))

    async def fetch_by_id(self, note_id: str, caller_is_authorized_reader: bool) -> str:
        if not caller_is_authorized_reader:
            logger.info("Read of note %s denied by read gate", note_id)
            raise ReadForbiddenError("Access denied")

        # full listing + linear scan; fine while the store stays small
        for note in await self.store.list_notes():
            if note.id == note_id:
                return note.content
        raise NoteNotFoundError("Not found")
