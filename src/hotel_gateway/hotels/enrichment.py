"""Tag upstream offers with negotiated-rate metadata."""
from __future__ import annotations

from typing import Any, Iterable, List

from hotel_gateway.suppliers.registry import SupplierCodeRegistry


def enrich_offer(offer: dict[str, Any], registry: SupplierCodeRegistry) -> dict[str, Any]:
    """Return a copy of ``offer`` with ``supplierName``/``isNegotiatedRate`` attached."""
    code = (offer.get("rateCode") or "").strip()
    entry = registry.lookup(code)
    enriched = dict(offer)
    enriched.pop("supplierName", None)
    if entry is not None:
        enriched["supplierName"] = entry.program_name
    enriched["isNegotiatedRate"] = entry is not None
    return enriched


def enrich_hotel(hotel: dict[str, Any], registry: SupplierCodeRegistry) -> dict[str, Any]:
    enriched = dict(hotel)
    offers = hotel.get("offers")
    if offers is not None:
        enriched["offers"] = [enrich_offer(offer, registry) for offer in offers]
    return enriched


def has_inventory(hotel: dict[str, Any]) -> bool:
    return hotel.get("available") is True and bool(hotel.get("offers"))


def enrich_available(hotels: Iterable[dict[str, Any]], registry: SupplierCodeRegistry) -> List[dict[str, Any]]:
    """Enrich every hotel and keep only the ones with bookable offers, preserving order."""
    return [enriched for enriched in (enrich_hotel(hotel, registry) for hotel in hotels) if has_inventory(enriched)]
