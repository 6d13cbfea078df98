from __future__ import annotations

import hmac
from typing import Optional


def verify_note_secret(supplied: Optional[str], expected: str) -> bool:
    if not supplied or not expected:
        return False
    # constant-time compare
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))
