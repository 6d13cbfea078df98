"""Best-effort calls to the remote text filter and script obfuscator.

Both services are optional layers over "store what the user sent": any
failure returns the input unchanged and is only logged.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from gitnotes.errors import TransformationError

logger = logging.getLogger(__name__)


class TransformClient:
    def __init__(
        self,
        filter_url: str,
        obfuscate_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.filter_url = filter_url
        self.obfuscate_url = obfuscate_url
        self.transport = transport

    async def _post_json(self, url: str, payload: dict) -> httpx.Response:
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                return await client.post(url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransformationError(f"request to {url} failed: {e}") from e

    @staticmethod
    def _string_field(res: httpx.Response, field: str, require_json_type: bool) -> str:
        if not res.is_success:
            raise TransformationError(f"status {res.status_code}")
        content_type = res.headers.get("content-type", "")
        if require_json_type and "application/json" not in content_type:
            raise TransformationError(f"unexpected content-type {content_type!r}")
        try:
            data = res.json()
        except ValueError as e:
            raise TransformationError(f"invalid JSON: {e}") from e
        value = data.get(field) if isinstance(data, dict) else None
        if not isinstance(value, str) or not value:
            raise TransformationError(f"no {field!r} string in response")
        return value

    async def filter_text(self, text: str) -> str:
        try:
            res = await self._post_json(self.filter_url, {"text": text})
            logger.debug("Filter API status: %s", res.status_code)
            return self._string_field(res, "filtered", require_json_type=True)
        except TransformationError as e:
            logger.warning("Filter unavailable, keeping original text: %s", e)
            return text

    async def obfuscate(self, content: str) -> str:
        try:
            res = await self._post_json(self.obfuscate_url, {"script": content})
            logger.debug("Obfuscate API status: %s", res.status_code)
            return self._string_field(res, "obfuscated", require_json_type=False)
        except TransformationError as e:
            logger.warning("Obfuscator unavailable, keeping original content: %s", e)
            return content
