"""Shared async HTTP client used by the captcha drivers for siteverify calls."""

from typing import Any, Optional

import httpx


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient with a configurable timeout.

    Created once in the app lifespan and injected into every driver; the
    drivers only ever call ``post_form``.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def post_form(self, url: str, data: dict[str, Any]) -> httpx.Response:
        """POST *data* form-encoded, asking for a JSON reply."""
        return await self._client.post(
            url, data=data, headers={"Accept": "application/json"}
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
