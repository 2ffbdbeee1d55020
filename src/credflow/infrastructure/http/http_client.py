from __future__ import annotations

from typing import Any, Dict, Optional, Type
from types import TracebackType

import httpx

from ...domain.errors import TransportError


class AsyncHttpClient:
    """Thin asynchronous JSON client wrapper around httpx.AsyncClient.

    - Normalizes base URLs and paths.
    - Applies a default timeout and follows redirects.
    - Translates network errors, non-successful responses and non-JSON
      bodies into ``TransportError``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            transport=transport,
        )

    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _send(
        self, method: str, path: str, json_body: Optional[Dict[str, Any]]
    ) -> Any:
        url = self._url(path)
        try:
            resp = await self._client.request(method, url, json=json_body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{method} {url} returned HTTP {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {url} returned a non-JSON body",
                url=url,
                status_code=resp.status_code,
            ) from e

    async def get_json(self, path: str) -> Any:
        return await self._send("GET", path, None)

    async def post_json(
        self, path: str, *, json: Optional[Dict[str, Any]] = None
    ) -> Any:
        return await self._send("POST", path, json)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()
