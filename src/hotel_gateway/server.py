"""MCP stdio server exposing the hotel tools to agents."""

import json
import logging
import sys
from typing import Annotated, Any, Dict, List, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from hotel_gateway.config.settings import Settings
from hotel_gateway.context import GatewayContext
from hotel_gateway.core.errors import ConfigurationError
from hotel_gateway.core.logging import configure_logging
from hotel_gateway.tools.query import HotelQueryService

logger = logging.getLogger(__name__)

SERVER_NAME = "amadeus-hotels"

RadiusUnit = Literal["KM", "MILE"]
HotelSource = Literal["BEDBANK", "DIRECTCHAIN", "ALL"]


async def _run(service: HotelQueryService, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    payload, is_error = await service.dispatch(name, arguments)
    if is_error:
        raise ToolError(json.dumps(payload, indent=2, default=str))
    return payload


def build_server(service: HotelQueryService) -> FastMCP:
    server = FastMCP(SERVER_NAME)

    @server.tool(
        name="search_hotels_by_city",
        description=(
            "Search for hotels in a city using its IATA city code (e.g. TLV, PAR, LON, NYC). "
            "Returns hotel IDs and basic info (name, chain, rating, address). "
            "No pricing here – use get_hotel_offers to check availability and rates."
        ),
    )
    async def search_hotels_by_city(
        city_code: Annotated[str, Field(description="IATA 3-letter city code, e.g. PAR")],
        radius: Annotated[Optional[float], Field(description="Search radius from city center (1-100, default 20)")] = None,
        radius_unit: Optional[RadiusUnit] = None,
        chain_codes: Annotated[Optional[List[str]], Field(description="Hotel chain codes, e.g. HH, MC, FS")] = None,
        amenities: Annotated[Optional[List[str]], Field(description="Amenity filters, e.g. SPA, SWIMMING_POOL")] = None,
        ratings: Annotated[Optional[List[str]], Field(description="Star ratings to include, e.g. ['4','5']")] = None,
        hotel_source: Optional[HotelSource] = None,
    ) -> Dict[str, Any]:
        return await _run(
            service,
            "search_hotels_by_city",
            {
                "city_code": city_code,
                "radius": radius,
                "radius_unit": radius_unit,
                "chain_codes": chain_codes,
                "amenities": amenities,
                "ratings": ratings,
                "hotel_source": hotel_source,
            },
        )

    @server.tool(
        name="search_hotels_by_geocode",
        description=(
            "Search for hotels near a specific latitude/longitude. "
            "Useful when the user mentions a specific address, landmark, or neighbourhood."
        ),
    )
    async def search_hotels_by_geocode(
        latitude: float,
        longitude: float,
        radius: Optional[float] = None,
        radius_unit: Optional[RadiusUnit] = None,
        chain_codes: Optional[List[str]] = None,
        amenities: Optional[List[str]] = None,
        ratings: Optional[List[str]] = None,
        hotel_source: Optional[HotelSource] = None,
    ) -> Dict[str, Any]:
        return await _run(
            service,
            "search_hotels_by_geocode",
            {
                "latitude": latitude,
                "longitude": longitude,
                "radius": radius,
                "radius_unit": radius_unit,
                "chain_codes": chain_codes,
                "amenities": amenities,
                "ratings": ratings,
                "hotel_source": hotel_source,
            },
        )

    @server.tool(
        name="get_hotel_offers",
        description=(
            "Get live room availability and rates for specific hotels on given dates. "
            "Negotiated/consortium rate codes are applied automatically and batches of 20 "
            "hotel IDs are handled transparently. Each rate is flagged as negotiated or not."
        ),
    )
    async def get_hotel_offers(
        hotel_ids: Annotated[List[str], Field(description="Hotel IDs from search_hotels_by_city")],
        check_in_date: Annotated[str, Field(description="Check-in date, YYYY-MM-DD")],
        check_out_date: Annotated[str, Field(description="Check-out date, YYYY-MM-DD")],
        adults: Optional[int] = None,
        room_quantity: Optional[int] = None,
        currency: Optional[str] = None,
        price_range: Annotated[Optional[str], Field(description="'MIN-MAX' per night, e.g. '100-400'")] = None,
        rate_codes: Annotated[Optional[List[str]], Field(description="Extra rate codes on top of the configured ones")] = None,
        payment_policy: Optional[Literal["GUARANTEE", "DEPOSIT", "NONE"]] = None,
        board_type: Optional[Literal["ROOM_ONLY", "BREAKFAST", "HALF_BOARD", "FULL_BOARD", "ALL_INCLUSIVE"]] = None,
        lang: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await _run(
            service,
            "get_hotel_offers",
            {
                "hotel_ids": hotel_ids,
                "check_in_date": check_in_date,
                "check_out_date": check_out_date,
                "adults": adults,
                "room_quantity": room_quantity,
                "currency": currency,
                "price_range": price_range,
                "rate_codes": rate_codes,
                "payment_policy": payment_policy,
                "board_type": board_type,
                "lang": lang,
            },
        )

    @server.tool(
        name="get_hotel_offer_details",
        description="Get the complete details of a single hotel offer by its offer ID.",
    )
    async def get_hotel_offer_details(offer_id: str, lang: Optional[str] = None) -> Dict[str, Any]:
        return await _run(service, "get_hotel_offer_details", {"offer_id": offer_id, "lang": lang})

    @server.tool(
        name="get_hotel_content",
        description="Fetch rich content for a hotel: images, description, contact details, and location.",
    )
    async def get_hotel_content(hotel_id: str) -> Dict[str, Any]:
        return await _run(service, "get_hotel_content", {"hotel_id": hotel_id})

    @server.tool(
        name="list_supplier_codes",
        description="List the negotiated rate / consortium program codes applied to offer searches.",
    )
    async def list_supplier_codes() -> Dict[str, Any]:
        return await _run(service, "list_supplier_codes", {})

    return server


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level, settings.log_dir)
    try:
        context = GatewayContext.create(settings)
    except ConfigurationError as exc:
        logger.error("Fatal: %s", exc)
        sys.exit(1)

    server = build_server(HotelQueryService(context))
    logger.info("MCP server starting on %s", settings.environment_label())
    server.run()


if __name__ == "__main__":
    main()
