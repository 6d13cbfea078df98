import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from gitnotes.api.notes import router as notes_router
from gitnotes.config import get_settings
from gitnotes.errors import NoteError, StorageError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # fail fast on missing configuration
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Serving notes from %s/%s@%s", settings.repo_owner, settings.repo_name, settings.branch)
    yield


app = FastAPI(title="Git Notes API", lifespan=lifespan)
app.include_router(notes_router)


@app.exception_handler(NoteError)
async def note_error_handler(request: Request, exc: NoteError) -> JSONResponse:
    detail = exc.detail() if isinstance(exc, StorageError) else exc.message
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return PlainTextResponse(
        f"Internal Server Error\n\nError: {type(exc).__name__}: {exc}",
        status_code=500,
    )


@app.get("/health")
def health():
    return {"ok": True}
