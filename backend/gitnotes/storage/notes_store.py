import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from gitnotes.config import Settings
from gitnotes.errors import StorageReadError, StorageWriteError
from gitnotes.storage import note_codec

logger = logging.getLogger(__name__)

NOTES_DIR = "notes"
NOTE_SUFFIX = ".txt"
USER_AGENT = "gitnotes/1.0"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _note_path(note_id: str) -> str:
    return f"{NOTES_DIR}/{note_id}{NOTE_SUFFIX}"


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str
    # display-only: regenerated as "now" on every read, never persisted
    created_at: str


class NotesStore:
    """
    Notes kept as one file per note under notes/ on a single branch of a
    GitHub repository, accessed through the contents API.

    Notes are immutable: there is no update or delete. Every list() re-reads
    the whole directory (1 listing + 1 download per note).
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport,
            headers={
                "Authorization": f"Bearer {self.settings.github_token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
            },
        )

    async def list_notes(self) -> list[Note]:
        url = f"{self.settings.contents_url}/{NOTES_DIR}"
        async with self._client() as client:
            try:
                res = await client.get(url, params={"ref": self.settings.branch})
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.error("Listing %s failed: %s", url, e)
                raise StorageReadError(f"Could not list notes: {e}") from e

            logger.debug("Contents API list status: %s", res.status_code)
            # 404 also means a wrong repo, branch or token scope, so it is an error too
            if not res.is_success:
                logger.error("Contents API list error %s: %s", res.status_code, res.text)
                raise StorageReadError("Contents API error while listing notes", res.status_code, res.text)

            try:
                entries = res.json()
            except ValueError as e:
                raise StorageReadError("Contents API returned invalid JSON", res.status_code, res.text) from e
            if not isinstance(entries, list):
                raise StorageReadError("Contents API listing is not a directory", res.status_code, res.text)

            out: list[Note] = []
            for entry in entries:
                if not isinstance(entry, dict):
                    logger.warning("Skipping malformed listing entry: %r", entry)
                    continue
                name = entry.get("name") or ""
                if not name.endswith(NOTE_SUFFIX):
                    continue
                raw = await self._download(client, entry)
                if raw is None:
                    continue
                title, content = note_codec.parse(raw)
                out.append(
                    Note(
                        id=name[: -len(NOTE_SUFFIX)],
                        title=title,
                        content=content,
                        created_at=_utc_now_iso(),
                    )
                )

        logger.debug("Loaded %d notes", len(out))
        return out

    async def _download(self, client: httpx.AsyncClient, entry: dict[str, Any]) -> Optional[str]:
        # one broken file must not hide the others
        name = entry.get("name")
        url = entry.get("download_url")
        if not url:
            logger.warning("Skipping %s: no download_url", name)
            return None
        try:
            res = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Skipping %s: download failed: %s", name, e)
            return None
        if not res.is_success:
            logger.warning("Skipping %s: download returned %s", name, res.status_code)
            return None
        return res.content.decode("utf-8", errors="replace")

    async def create_note(self, note_id: str, title: str, content: str) -> None:
        path = _note_path(note_id)
        body = {
            "message": f"Add note: {note_id}",
            "content": note_codec.to_transport(note_codec.encode(title, content)),
            "branch": self.settings.branch,
        }

        logger.debug("Storing note at %s", path)
        async with self._client() as client:
            try:
                res = await client.put(f"{self.settings.contents_url}/{path}", json=body)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.error("Writing %s failed: %s", path, e)
                raise StorageWriteError(f"Could not store note {note_id}: {e}") from e

        logger.debug("Contents API write status: %s", res.status_code)
        if not res.is_success:
            logger.error("Contents API write error %s: %s", res.status_code, res.text)
            raise StorageWriteError(f"Contents API error while storing note {note_id}", res.status_code, res.text)
