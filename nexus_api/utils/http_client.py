import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from nexus_api.config import LOOKUP_TIMEOUT_SECONDS
from nexus_api.services.errors import UpstreamError


logger = logging.getLogger(__name__)


class HttpClient:
    """Outbound GETs with a fixed total timeout and no retries.

    Every failure mode (timeout, connection error, non-2xx) is raised as
    UpstreamError so callers only have one thing to degrade on.
    """

    def __init__(self, timeout_seconds: float = LOOKUP_TIMEOUT_SECONDS) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def get_text(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        try:
            async with self._get_session().get(url, params=params) as resp:
                resp.raise_for_status()
                body = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise UpstreamError(f"GET {url} failed: {exc!r}") from exc
        # a 2xx page counts as reachable even when its body does not decode
        return body.decode("utf-8", errors="replace")

    async def get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        try:
            async with self._get_session().get(url, params=params) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise UpstreamError(f"GET {url} failed: {exc!r}") from exc

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


_http = None


async def get_http_client() -> HttpClient:
    global _http
    if _http is None:
        _http = HttpClient()
    return _http


async def close_http_client() -> None:
    global _http
    if _http is not None:
        await _http.close()
        _http = None
