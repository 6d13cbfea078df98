from __future__ import annotations

from typing import Optional


class NoteError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(NoteError):
    status_code = 400


class AuthorizationError(NoteError):
    status_code = 401


class ReadForbiddenError(AuthorizationError):
    # read gate failure, see utils/read_gate.py
    status_code = 403


class NoteNotFoundError(NoteError):
    status_code = 404


class StorageError(NoteError):
    status_code = 502

    def __init__(self, message: str, remote_status: Optional[int] = None, remote_body: str = ""):
        super().__init__(message)
        self.remote_status = remote_status
        self.remote_body = remote_body

    def detail(self) -> str:
        if self.remote_status is None:
            return self.message
        return f"{self.message} (status {self.remote_status}): {self.remote_body}"


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


class TransformationError(Exception):
    """Raised inside the transformation client only; never leaves it."""
