"""Explicitly constructed shared state: HTTP client, token cache and rate-code registry."""
from __future__ import annotations

import logging
import time
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from hotel_gateway.auth.bearer import BearerAuth
from hotel_gateway.auth.token_manager import TokenManager
from hotel_gateway.config.settings import Settings
from hotel_gateway.services.batcher import OfferBatcher
from hotel_gateway.services.hotel_client import HotelApiClient
from hotel_gateway.suppliers.registry import SUPPLIER_CODES, SupplierCodeRegistry

logger = logging.getLogger(__name__)

USER_AGENT = "hotel-gateway/0.1.0"


@dataclass
class GatewayContext(AbstractAsyncContextManager["GatewayContext"]):
    settings: Settings
    http: httpx.AsyncClient
    tokens: TokenManager
    registry: SupplierCodeRegistry
    api: HotelApiClient
    batcher: OfferBatcher

    @classmethod
    def create(
        cls,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        registry: Optional[SupplierCodeRegistry] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "GatewayContext":
        client_id, client_secret = settings.require_credentials()

        http = httpx.AsyncClient(
            timeout=settings.request_timeout_s,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            transport=transport,
        )
        tokens = TokenManager(
            http,
            token_url=settings.token_url,
            client_id=client_id,
            client_secret=client_secret,
            guest_office_id=settings.guest_office_id,
            safety_margin_s=settings.token_safety_margin_s,
            clock=clock,
        )
        if registry is None:
            registry = SupplierCodeRegistry(SUPPLIER_CODES, default_codes=settings.rate_codes or None)
        api = HotelApiClient(http, base_url=settings.api_base_url, auth=BearerAuth(tokens))
        batcher = OfferBatcher(
            api,
            registry,
            batch_size=settings.batch_size,
            delay_s=settings.batch_delay_s,
            max_rate_codes=settings.max_rate_codes,
            default_payment_policy=settings.payment_policy,
        )
        logger.info(
            "Gateway ready on %s with rate codes %s",
            settings.environment_label(),
            ", ".join(registry.default_codes()),
        )
        return cls(settings=settings, http=http, tokens=tokens, registry=registry, api=api, batcher=batcher)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aexit__(self, exc_type, exc, exc_tb) -> None:
        await self.aclose()
