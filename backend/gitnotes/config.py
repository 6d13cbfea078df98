from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

DEFAULT_BRANCH = "main"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_FILTER_URL = "https://tiny-river-0235.hiplitehehe.workers.dev/"
DEFAULT_OBFUSCATE_URL = "https://broken-pine-ac7f.hiplitehehe.workers.dev/api/obfuscate"

REQUIRED_VARS = ("REPO_OWNER", "REPO_NAME", "GITHUB_TOKEN", "NOTE_PASSWORD")


@dataclass(frozen=True)
class Settings:
    repo_owner: str
    repo_name: str
    github_token: str
    note_password: str
    branch: str = DEFAULT_BRANCH
    github_api_url: str = DEFAULT_GITHUB_API_URL
    filter_url: str = DEFAULT_FILTER_URL
    obfuscate_url: str = DEFAULT_OBFUSCATE_URL
    log_level: str = "INFO"

    @property
    def contents_url(self) -> str:
        return f"{self.github_api_url.rstrip('/')}/repos/{self.repo_owner}/{self.repo_name}/contents"


def load_settings() -> Settings:
    """
    Build settings from the environment.

    Raises RuntimeError naming every missing required variable, so a
    misconfigured process stops at startup instead of sending malformed
    requests to the contents API.
    """
    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        repo_owner=os.environ["REPO_OWNER"],
        repo_name=os.environ["REPO_NAME"],
        github_token=os.environ["GITHUB_TOKEN"],
        note_password=os.environ["NOTE_PASSWORD"],
        branch=os.getenv("BRANCH") or DEFAULT_BRANCH,
        github_api_url=os.getenv("GITHUB_API_URL") or DEFAULT_GITHUB_API_URL,
        filter_url=os.getenv("FILTER_URL") or DEFAULT_FILTER_URL,
        obfuscate_url=os.getenv("OBFUSCATE_URL") or DEFAULT_OBFUSCATE_URL,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache
def get_settings() -> Settings:
    # .env is for local development; real env vars win
    load_dotenv()
    return load_settings()
