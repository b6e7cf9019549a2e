"""TinyPNG API client with retry logic.

The API is two plain HTTPS calls (upload to shrink, then download the
result), so the standard library client is enough.
"""

from __future__ import annotations

import asyncio
import base64
import json
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any

from ..config import CONNECT_TIMEOUT, MAX_RETRIES, READ_TIMEOUT, TINYPNG_SHRINK_URL


@dataclass(frozen=True)
class HTTPError(Exception):
    """Raised for non-2xx HTTP responses."""

    url: str
    status_code: int
    headers: dict[str, str]
    content: bytes

    def __str__(self) -> str:  # pragma: no cover - trivial
        detail = _error_message(self.content)
        return f"HTTP {self.status_code} for {self.url}" + (f": {detail}" if detail else "")


class TinyPngClient:
    """Async client for the TinyPNG shrink API."""

    def __init__(self, api_key: str, max_retries: int = MAX_RETRIES, shrink_url: str = TINYPNG_SHRINK_URL):
        if not api_key:
            raise ValueError("api_key is required")
        token = base64.b64encode(f"api:{api_key}".encode()).decode("ascii")
        self._auth = f"Basic {token}"
        self._max_retries = max(1, int(max_retries))
        self.shrink_url = shrink_url

    async def compress(self, data: bytes) -> bytes:
        """Upload an image and return the compressed bytes."""
        _, headers = await self._request(self.shrink_url, method="POST", data=data)
        location = headers.get("Location") or headers.get("location")
        if not location:
            raise RuntimeError("TinyPNG response did not include a Location header")
        content, _ = await self._request(location, method="GET")
        return content

    async def __aenter__(self) -> TinyPngClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        return

    async def _request(self, url: str, method: str, data: bytes | None = None) -> tuple[bytes, dict[str, str]]:
        backoff = 1.0

        for attempt in range(1, self._max_retries + 1):
            try:
                content, headers, status = await asyncio.to_thread(self._request_sync, url, method, data)
            except urllib.error.URLError:
                if attempt >= self._max_retries:
                    raise
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2.0, 10.0)
                continue

            if status == 429 or status >= 500:
                if attempt >= self._max_retries:
                    raise HTTPError(url=url, status_code=status, headers=headers, content=content)
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2.0, 10.0)
                continue

            if status >= 400:
                raise HTTPError(url=url, status_code=status, headers=headers, content=content)

            return content, headers

        raise RuntimeError("unreachable")

    def _request_sync(self, url: str, method: str, data: bytes | None) -> tuple[bytes, dict[str, str], int]:
        # urllib only has a single timeout, so we pick the larger of connect/read.
        timeout = max(float(CONNECT_TIMEOUT), float(READ_TIMEOUT))
        req = urllib.request.Request(
            url,
            data=data,
            headers={"Authorization": self._auth},
            method=method,
        )
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                status = int(getattr(resp, "status", 200))
                headers = {k: v for k, v in resp.headers.items()}
                content = resp.read() or b""
        except urllib.error.HTTPError as e:
            status = int(getattr(e, "code", 0) or 0)
            headers = {k: v for k, v in (e.headers.items() if e.headers else [])}
            content = e.read() or b""
        return content, headers, status


def _error_message(content: bytes) -> str:
    try:
        payload = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return ""
    if isinstance(payload, dict):
        return str(payload.get("message") or payload.get("error") or "")
    return ""
