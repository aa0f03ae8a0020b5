"""Caller-facing hotel operations and the tool dispatch table."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

import httpx

from hotel_gateway.context import GatewayContext
from hotel_gateway.core.errors import GatewayError, UpstreamError, ValidationError
from hotel_gateway.hotels.enrichment import enrich_offer
from hotel_gateway.hotels.requests import (
    CitySearch,
    ContentRequest,
    GeocodeSearch,
    OfferDetailRequest,
    OfferSearch,
    parse_request,
)
from hotel_gateway.hotels.shaping import shape_content, summarize_offer_group, summarize_property

logger = logging.getLogger(__name__)

CONTENT_UNAVAILABLE = "No content available for this hotel"


class HotelQueryService:
    """The six operations exposed to agents. All return JSON-ready dicts."""

    def __init__(self, context: GatewayContext) -> None:
        self.context = context
        self._tools: Dict[str, Callable[[Mapping[str, Any]], Awaitable[Dict[str, Any]]]] = {
            "search_hotels_by_city": self.search_by_city,
            "search_hotels_by_geocode": self.search_by_geocode,
            "get_hotel_offers": self.fetch_offers,
            "get_hotel_offer_details": self.fetch_offer_detail,
            "get_hotel_content": self.fetch_content,
            "list_supplier_codes": self.list_supplier_codes,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    @property
    def environment(self) -> str:
        return self.context.settings.environment_label()

    async def search_by_city(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        search = parse_request(CitySearch, arguments)
        hotels = await self.context.api.hotels_by_city(search.to_query())
        return {
            "environment": self.environment,
            "cityCode": search.city_code,
            "count": len(hotels),
            "hotels": [summarize_property(hotel) for hotel in hotels],
        }

    async def search_by_geocode(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        search = parse_request(GeocodeSearch, arguments)
        hotels = await self.context.api.hotels_by_geocode(search.to_query())
        return {
            "environment": self.environment,
            "center": {"latitude": search.latitude, "longitude": search.longitude},
            "count": len(hotels),
            "hotels": [summarize_property(hotel, include_amenities=False) for hotel in hotels],
        }

    async def fetch_offers(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        search = parse_request(OfferSearch, arguments)
        result = await self.context.batcher.fetch(search)
        response: Dict[str, Any] = {
            "environment": self.environment,
            "checkIn": search.check_in_date.isoformat(),
            "checkOut": search.check_out_date.isoformat(),
            "nights": search.nights,
            "adults": search.adults,
            "rooms": search.room_quantity,
            "negotiatedRateCodesApplied": result.rate_codes,
            "hotelsSearched": len(search.hotel_ids),
            "hotelsAvailable": len(result.hotels),
            "results": [summarize_offer_group(hotel) for hotel in result.hotels],
        }
        if result.partial:
            response["failedBatches"] = [failure.to_dict() for failure in result.failures]
        return response

    async def fetch_offer_detail(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        request = parse_request(OfferDetailRequest, arguments)
        offer = await self.context.api.hotel_offer(request.offer_id, lang=request.lang)
        registry = self.context.registry
        detail = dict(offer)
        if detail.get("offers"):
            detail["offers"] = [enrich_offer(item, registry) for item in detail["offers"]]
        return detail

    async def fetch_content(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        request = parse_request(ContentRequest, arguments)
        try:
            content = await self.context.api.hotel_content(request.hotel_id)
        except (GatewayError, httpx.HTTPError) as exc:
            logger.warning("Hotel content unavailable for %s: %s", request.hotel_id, exc)
            content = None
        if not content:
            return {"hotelId": request.hotel_id, "available": False, "error": CONTENT_UNAVAILABLE}
        return shape_content(request.hotel_id, content)

    async def list_supplier_codes(self, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        registry = self.context.registry
        active = registry.default_codes()
        return {
            "description": (
                "These rate codes are automatically injected into every hotel offer search "
                "to retrieve negotiated and consortium rates."
            ),
            "activeCodesCount": len(active),
            "activeCodes": active,
            "allKnownCodes": [
                {**entry.to_dict(), "active": registry.is_active(entry.code)} for entry in registry.all_entries()
            ],
        }

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Run a tool by name; errors propagate as :class:`GatewayError` subclasses."""
        handler = self._tools.get(name)
        if handler is None:
            raise ValidationError(f"Unknown tool: {name}", code="unknown_tool")
        return await handler(arguments or {})

    async def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> tuple[Dict[str, Any], bool]:
        """Run a tool and fold failures into a structured payload. Returns ``(payload, is_error)``."""
        try:
            return await self.call(name, arguments), False
        except GatewayError as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return exc.to_payload(), True
        except httpx.HTTPError as exc:
            logger.exception("Tool %s failed with transport error", name)
            return UpstreamError(str(exc)).to_payload(), True
