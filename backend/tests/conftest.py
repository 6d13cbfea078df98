import base64
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from gitnotes.config import get_settings, load_settings
from gitnotes.storage import note_codec

OWNER = "octo"
REPO = "notes-repo"
BRANCH = "main"
FILTER_URL = "https://filter.test/"
OBFUSCATE_URL = "https://obfuscate.test/api/obfuscate"
PASSWORD = "s3cret"
READER_UA = "Mozilla/5.0 Roblox/WinInet"


def decode_payload(payload: str) -> str:
    # GitHub wraps base64 content at 60 columns
    return base64.b64decode("".join(payload.split())).decode("utf-8")


class FakeRemote:
    """
    In-memory stand-in for the GitHub contents API, the raw download host
    and both transformation services, served through httpx.MockTransport.
    """

    def __init__(self):
        self.files: dict[str, str] = {}
        self.broken: set[str] = set()
        self.extra_entries: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.puts: list[dict] = []
        self.filter_up = True
        self.obfuscate_up = True
        self.list_status = 200
        self.put_status = None

    # test helpers
    def add_note(self, note_id: str, title: str, content: str) -> None:
        self.files[f"{note_id}.txt"] = note_codec.encode(title, content)

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host == "api.github.com":
            return self._contents_api(request)
        if host == "raw.githubusercontent.com":
            return self._raw(request)
        if host == "filter.test":
            if not self.filter_up:
                raise httpx.ConnectError("filter down", request=request)
            text = json.loads(request.content)["text"]
            return httpx.Response(200, json={"filtered": text.replace("darn", "****")})
        if host == "obfuscate.test":
            if not self.obfuscate_up:
                raise httpx.ConnectError("obfuscator down", request=request)
            script = json.loads(request.content)["script"]
            return httpx.Response(200, json={"obfuscated": f"--[[obf]] {script}"})
        return httpx.Response(404)

    def _contents_api(self, request: httpx.Request) -> httpx.Response:
        prefix = f"/repos/{OWNER}/{REPO}/contents/notes"
        path = request.url.path
        if request.method == "GET" and path == prefix:
            if self.list_status != 200:
                return httpx.Response(self.list_status, json={"message": "boom"})
            if request.url.params.get("ref") != BRANCH:
                return httpx.Response(404, json={"message": "No commit found for the ref"})
            entries = [
                {
                    "name": name,
                    "download_url": f"https://raw.githubusercontent.com/{OWNER}/{REPO}/{BRANCH}/notes/{name}",
                }
                for name in sorted(self.files)
            ]
            return httpx.Response(200, json=entries + self.extra_entries)
        if request.method == "PUT" and path.startswith(prefix + "/"):
            name = path[len(prefix) + 1:]
            body = json.loads(request.content)
            self.puts.append(body)
            if self.put_status is not None:
                return httpx.Response(self.put_status, json={"message": "Bad credentials"})
            if name in self.files:
                return httpx.Response(422, json={"message": '"sha" wasn\'t supplied.'})
            self.files[name] = decode_payload(body["content"])
            return httpx.Response(201, json={"content": {"name": name}})
        return httpx.Response(404, json={"message": "Not Found"})

    def _raw(self, request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1]
        if name in self.broken or name not in self.files:
            return httpx.Response(404, text="404: Not Found")
        return httpx.Response(200, content=self.files[name].encode("utf-8"))


@pytest.fixture()
def env(monkeypatch):
    monkeypatch.setenv("REPO_OWNER", OWNER)
    monkeypatch.setenv("REPO_NAME", REPO)
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
    monkeypatch.setenv("NOTE_PASSWORD", PASSWORD)
    monkeypatch.setenv("BRANCH", BRANCH)
    monkeypatch.setenv("FILTER_URL", FILTER_URL)
    monkeypatch.setenv("OBFUSCATE_URL", OBFUSCATE_URL)
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings(env):
    return load_settings()


@pytest.fixture()
def remote():
    return FakeRemote()


@pytest.fixture()
def service(settings, remote):
    from gitnotes.services.note_service import NoteService
    from gitnotes.storage.notes_store import NotesStore
    from gitnotes.utils.transform_client import TransformClient

    transport = remote.transport()
    return NoteService(
        store=NotesStore(settings, transport=transport),
        transformer=TransformClient(settings.filter_url, settings.obfuscate_url, transport=transport),
        note_password=settings.note_password,
    )


@pytest.fixture()
def client(env, service):
    from gitnotes.api.notes import get_note_service
    from gitnotes.main import app

    app.dependency_overrides[get_note_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
