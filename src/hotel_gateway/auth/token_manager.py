"""Client-credentials token cache for the Amadeus APIs."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from hotel_gateway.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Credential:
    """Bearer token plus the monotonic instant at which it expires."""

    token: str
    expires_at: float

    def usable(self, now: float, margin: float) -> bool:
        return now < self.expires_at - margin


class TokenManager:
    """Fetches and caches a bearer token, refreshing it before it runs out.

    Failures are never retried here; the calling operation fails and the next
    call performs a fresh exchange.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        token_url: str,
        client_id: str,
        client_secret: str,
        guest_office_id: Optional[str] = None,
        safety_margin_s: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._guest_office_id = guest_office_id
        self._safety_margin_s = safety_margin_s
        self._clock = clock
        self._credential: Optional[Credential] = None
        self._lock = asyncio.Lock()

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    def invalidate(self) -> None:
        self._credential = None

    async def get_token(self) -> str:
        cached = self._credential
        if cached and cached.usable(self._clock(), self._safety_margin_s):
            return cached.token

        async with self._lock:
            # Another waiter may have refreshed while we queued on the lock.
            cached = self._credential
            if cached and cached.usable(self._clock(), self._safety_margin_s):
                return cached.token
            credential = await self._exchange()
            self._credential = credential
            return credential.token

    async def _exchange(self) -> Credential:
        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }
        if self._guest_office_id:
            form["guest_office_id"] = self._guest_office_id

        requested_at = self._clock()
        logger.info("Requesting access token from %s", self._token_url)
        try:
            response = await self._client.post(
                self._token_url,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as exc:
            raise AuthenticationError(f"Token request failed: {exc}") from exc

        if response.is_error:
            payload = _response_payload(response)
            logger.error("Token request rejected (%s): %s", response.status_code, payload)
            raise AuthenticationError(
                f"Token request rejected ({response.status_code})",
                status=response.status_code,
                payload=payload,
            )

        try:
            data = response.json()
            token = data["access_token"]
            expires_in = float(data["expires_in"])
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthenticationError("Token response missing access_token/expires_in") from exc

        logger.info("Obtained access token valid for %ss", int(expires_in))
        return Credential(token=token, expires_at=requested_at + expires_in)


def _response_payload(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return response.text[:512]
