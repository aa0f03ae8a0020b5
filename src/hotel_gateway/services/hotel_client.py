"""Client for the Amadeus hotel list, offer and content endpoints."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import httpx

from hotel_gateway.core.errors import UpstreamError

logger = logging.getLogger(__name__)

HOTELS_BY_CITY_PATH = "/v1/reference-data/locations/hotels/by-city"
HOTELS_BY_GEOCODE_PATH = "/v1/reference-data/locations/hotels/by-geocode"
HOTEL_OFFERS_PATH = "/v3/shopping/hotel-offers"
HOTEL_CONTENT_PATH = "/v1/reference-data/locations/hotels"


class HotelApiClient:
    """One method per upstream endpoint; every request is authenticated through ``auth``.

    Non-2xx responses raise :class:`UpstreamError` carrying the status and decoded body.
    """

    def __init__(self, client: httpx.AsyncClient, *, base_url: str, auth: httpx.Auth) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._auth = auth

    async def hotels_by_city(self, query: Mapping[str, object]) -> List[Dict[str, Any]]:
        logger.info("Searching hotels by city %s (radius %s)", query.get("cityCode"), query.get("radius"))
        payload = await self._get(HOTELS_BY_CITY_PATH, query)
        return _records(payload, HOTELS_BY_CITY_PATH)

    async def hotels_by_geocode(self, query: Mapping[str, object]) -> List[Dict[str, Any]]:
        logger.info(
            "Searching hotels near %s,%s (radius %s)",
            query.get("latitude"),
            query.get("longitude"),
            query.get("radius"),
        )
        payload = await self._get(HOTELS_BY_GEOCODE_PATH, query)
        return _records(payload, HOTELS_BY_GEOCODE_PATH)

    async def hotel_offers(self, query: Mapping[str, object]) -> List[Dict[str, Any]]:
        payload = await self._get(HOTEL_OFFERS_PATH, query)
        hotels = _records(payload, HOTEL_OFFERS_PATH)
        for hotel in hotels:
            offers = hotel.get("offers")
            if offers is not None and not _is_record_list(offers):
                raise UpstreamError(f"Malformed offers in {HOTEL_OFFERS_PATH} response", payload=hotel)
        return hotels

    async def hotel_offer(self, offer_id: str, *, lang: Optional[str] = None) -> Dict[str, Any]:
        query = {"lang": lang} if lang else {}
        path = f"{HOTEL_OFFERS_PATH}/{quote(offer_id, safe='')}"
        payload = await self._get(path, query)
        data = payload.get("data") or {}
        offers = data.get("offers") if isinstance(data, dict) else None
        if not isinstance(data, dict) or (offers is not None and not _is_record_list(offers)):
            raise UpstreamError(f"Unexpected data from {path}", payload=payload)
        return data

    async def hotel_content(self, hotel_id: str) -> Optional[Dict[str, Any]]:
        payload = await self._get(f"{HOTEL_CONTENT_PATH}/{quote(hotel_id, safe='')}", {})
        data = payload.get("data")
        if not isinstance(data, dict):
            if data:
                logger.warning("Ignoring malformed content for %s: %r", hotel_id, data)
            return None
        return data or None

    async def _get(self, path: str, params: Mapping[str, object]) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        logger.debug("GET %s params=%s", url, dict(params))
        try:
            response = await self._client.get(url, params=dict(params), auth=self._auth)
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"Request to {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request to {path} failed: {exc}") from exc

        if response.is_error:
            payload = _decode(response)
            logger.warning("GET %s returned %s: %s", path, response.status_code, payload)
            raise UpstreamError(
                f"Request to {path} failed ({response.status_code})",
                status=response.status_code,
                payload=payload,
            )
        body = _decode(response)
        if not isinstance(body, dict):
            raise UpstreamError(f"Unexpected response body from {path}", status=response.status_code, payload=body)
        return body


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:512]


def _is_record_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


def _records(payload: Dict[str, Any], path: str) -> List[Dict[str, Any]]:
    data = payload.get("data") or []
    if not _is_record_list(data):
        raise UpstreamError(f"Unexpected data from {path}", payload=payload)
    return data
