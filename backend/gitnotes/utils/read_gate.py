from __future__ import annotations

from typing import Optional

from fastapi import Header

READER_MARKER = "Roblox"


def is_authorized_reader(user_agent: Optional[str]) -> bool:
    """
    Single rule: the caller may read note content iff its User-Agent header
    contains "Roblox".

    WARNING: anyone can send that header. This is a compatibility gate kept
    for existing clients, not access control; do not rely on it to protect
    anything.
    """
    return READER_MARKER in (user_agent or "")


def get_reader_flag(user_agent: str | None = Header(default=None, alias="User-Agent")) -> bool:
    return is_authorized_reader(user_agent)
