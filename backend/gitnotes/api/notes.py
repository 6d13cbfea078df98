from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from gitnotes.config import get_settings
from gitnotes.models.notes import NoteCreate, NoteCreated, NoteSummary
from gitnotes.services.note_service import NoteService
from gitnotes.storage.notes_store import NotesStore
from gitnotes.utils.read_gate import get_reader_flag
from gitnotes.utils.transform_client import TransformClient

router = APIRouter(prefix="/notes", tags=["notes"])


def get_note_service() -> NoteService:
    settings = get_settings()
    return NoteService(
        store=NotesStore(settings),
        transformer=TransformClient(settings.filter_url, settings.obfuscate_url),
        note_password=settings.note_password,
    )


@router.post("", response_model=NoteCreated, status_code=201)
async def create_note(payload: NoteCreate, service: NoteService = Depends(get_note_service)) -> NoteCreated:
    note_id = await service.submit(payload.title, payload.content, payload.password)
    return NoteCreated(id=note_id)


@router.get("", response_model=list[NoteSummary])
async def list_notes(
    sort: str = Query(default="desc"),
    service: NoteService = Depends(get_note_service),
) -> list[NoteSummary]:
    notes = await service.list_notes(sort=sort)
    return [NoteSummary(id=n.id, title=n.title, created_at=n.created_at) for n in notes]


@router.get("/{note_id}", response_class=PlainTextResponse)
async def get_note(
    note_id: str,
    is_reader: bool = Depends(get_reader_flag),
    service: NoteService = Depends(get_note_service),
) -> PlainTextResponse:
    content = await service.fetch_by_id(note_id, is_reader)
    return PlainTextResponse(content)
