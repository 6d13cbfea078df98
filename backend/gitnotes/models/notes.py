from typing import Optional

from pydantic import BaseModel


class NoteCreate(BaseModel):
    title: Optional[str] = None
    # emptiness is checked by NoteService so it happens before any remote call
    content: str = ""
    password: str = ""


class NoteCreated(BaseModel):
    id: str


class NoteSummary(BaseModel):
    id: str
    title: str
    created_at: str
