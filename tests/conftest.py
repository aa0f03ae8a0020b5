from __future__ import annotations

from typing import Any, Callable, Optional

import httpx
import pytest
import pytest_asyncio

from hotel_gateway.config.settings import Settings
from hotel_gateway.context import GatewayContext

OfferHandler = Callable[[dict[str, str], int], httpx.Response]


class FakeAmadeus:
    """Routes requests the way the upstream API would and records what was sent."""

    def __init__(self) -> None:
        self.token_requests: list[httpx.Request] = []
        self.requests: list[httpx.Request] = []
        self.offer_params: list[dict[str, str]] = []
        self.token_lifetime = 1799
        self.token_status = 200
        self.offer_handler: Optional[OfferHandler] = None
        self.routes: dict[str, httpx.Response] = {}

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if not request.url.path.endswith("/oauth2/token")]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/v1/security/oauth2/token":
            self.token_requests.append(request)
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            return httpx.Response(
                200,
                json={
                    "access_token": f"tok-{len(self.token_requests)}",
                    "expires_in": self.token_lifetime,
                    "token_type": "Bearer",
                },
            )
        if path == "/v3/shopping/hotel-offers":
            params = dict(request.url.params)
            self.offer_params.append(params)
            if self.offer_handler is None:
                return httpx.Response(200, json={"data": []})
            return self.offer_handler(params, len(self.offer_params))
        if path in self.routes:
            canned = self.routes[path]
            return httpx.Response(canned.status_code, headers=canned.headers, content=canned.content)
        return httpx.Response(404, json={"errors": [{"status": 404, "title": "NOT FOUND"}]})


def hotel_entry(hotel_id: str, *, available: bool = True, rate_codes: tuple[str, ...] = ("RAC",)) -> dict[str, Any]:
    return {
        "type": "hotel-offers",
        "hotel": {"hotelId": hotel_id, "name": f"Hotel {hotel_id}", "rating": "5"},
        "available": available,
        "offers": [
            {
                "id": f"{hotel_id}-{code}",
                "checkInDate": "2025-06-01",
                "checkOutDate": "2025-06-03",
                "rateCode": code,
                "room": {"type": "A1K", "description": {"text": "Deluxe King", "lang": "EN"}},
                "guests": {"adults": 2},
                "price": {"currency": "EUR", "total": "640.00"},
                "policies": {"paymentType": "guarantee", "checkInOut": {"checkIn": "15:00", "checkOut": "12:00"}},
            }
            for code in rate_codes
        ],
    }


@pytest.fixture
def fake_upstream() -> FakeAmadeus:
    return FakeAmadeus()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _build(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "client_id": "client-id",
            "client_secret": "client-secret",
            "env": "test",
            "rate_codes": (),
            "batch_delay_s": 0.0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _build


@pytest_asyncio.fixture
async def make_context(fake_upstream: FakeAmadeus, make_settings: Callable[..., Settings]):
    contexts: list[GatewayContext] = []

    def _build(**overrides: Any) -> GatewayContext:
        context = GatewayContext.create(make_settings(**overrides), transport=httpx.MockTransport(fake_upstream))
        contexts.append(context)
        return context

    yield _build
    for context in contexts:
        await context.aclose()
