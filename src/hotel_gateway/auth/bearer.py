"""httpx auth hook that stamps every outbound API request with a bearer token."""
from __future__ import annotations

from typing import AsyncGenerator, Generator

import httpx

from hotel_gateway.auth.token_manager import TokenManager


class BearerAuth(httpx.Auth):
    """Attach ``Authorization: Bearer <token>`` using the shared token manager."""

    def __init__(self, tokens: TokenManager) -> None:
        self._tokens = tokens

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self._tokens.get_token()
        request.headers["Authorization"] = f"Bearer {token}"
        yield request

    def sync_auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        raise RuntimeError("BearerAuth requires httpx.AsyncClient")
