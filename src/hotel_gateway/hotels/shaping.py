"""Trim raw upstream payloads down to the fields callers work with."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

MAX_SUMMARY_AMENITIES = 8
MAX_CONTENT_IMAGES = 10
PREFERRED_IMAGE_SCALE = "/F.jpg"


def summarize_property(hotel: Dict[str, Any], *, include_amenities: bool = True) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "hotelId": hotel.get("hotelId"),
        "name": hotel.get("name"),
        "chainCode": hotel.get("chainCode"),
        "rating": hotel.get("rating"),
        "address": hotel.get("address"),
        "geoCode": hotel.get("geoCode"),
        "distance": hotel.get("distance"),
    }
    if include_amenities:
        amenities = hotel.get("amenities")
        summary["amenities"] = list(amenities[:MAX_SUMMARY_AMENITIES]) if amenities else None
    return summary


def summarize_offer(offer: Dict[str, Any]) -> Dict[str, Any]:
    room = offer.get("room") or {}
    policies = offer.get("policies") or {}
    check_in_out = policies.get("checkInOut") or {}
    shaped: Dict[str, Any] = {
        "offerId": offer.get("id"),
        "rateCode": offer.get("rateCode"),
        "isNegotiatedRate": bool(offer.get("isNegotiatedRate")),
        "boardType": offer.get("boardType"),
        "room": room.get("typeEstimated") or room.get("type"),
        "roomDescription": (room.get("description") or {}).get("text"),
        "checkIn": offer.get("checkInDate"),
        "checkOut": offer.get("checkOutDate"),
        "checkInTime": check_in_out.get("checkIn"),
        "checkOutTime": check_in_out.get("checkOut"),
        "price": offer.get("price"),
        "paymentType": policies.get("paymentType"),
        "cancellation": policies.get("cancellation"),
    }
    if "supplierName" in offer:
        shaped["supplierName"] = offer["supplierName"]
    return shaped


def summarize_offer_group(hotel_offer: Dict[str, Any]) -> Dict[str, Any]:
    hotel = hotel_offer.get("hotel") or {}
    return {
        "hotelId": hotel.get("hotelId"),
        "hotelName": hotel.get("name"),
        "rating": hotel.get("rating"),
        "address": hotel.get("address"),
        "offers": [summarize_offer(offer) for offer in hotel_offer.get("offers") or []],
    }


def _dicts(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _pick_image(scales: Any) -> Optional[str]:
    fallback: Optional[str] = None
    for scale in _dicts(scales):
        href = scale.get("href")
        if not isinstance(href, str) or not href:
            continue
        if PREFERRED_IMAGE_SCALE in href:
            return href
        if fallback is None:
            fallback = href
    return fallback


def extract_images(media: Any, *, limit: int = MAX_CONTENT_IMAGES) -> List[str]:
    images: List[str] = []
    for item in _dicts(media):
        href = _pick_image(item.get("mediaScales"))
        if href:
            images.append(href)
    return images[:limit]


def shape_content(hotel_id: str, content: Dict[str, Any]) -> Dict[str, Any]:
    basic = content.get("basic")
    if not isinstance(basic, dict):
        basic = {}
    media = _dicts(basic.get("media"))
    contacts = _dicts(basic.get("contact"))
    descriptions = (item.get("description") for item in media)
    description = next(
        (entry["text"] for entry in descriptions if isinstance(entry, dict) and entry.get("text")),
        None,
    )
    return {
        "hotelId": hotel_id,
        "available": True,
        "name": basic.get("name"),
        "rating": basic.get("rating"),
        "chainName": basic.get("chainName"),
        "brandName": basic.get("brandName"),
        "contact": contacts[0] if contacts else None,
        "location": basic.get("location"),
        "images": extract_images(media),
        "description": description,
    }
