"""Hotel request models, offer enrichment and response shaping."""

from .enrichment import enrich_available, enrich_hotel, enrich_offer, has_inventory
from .requests import (
    CitySearch,
    ContentRequest,
    GeocodeSearch,
    OfferDetailRequest,
    OfferSearch,
    parse_request,
)
from .shaping import (
    extract_images,
    shape_content,
    summarize_offer,
    summarize_offer_group,
    summarize_property,
)

__all__ = [
    "CitySearch",
    "ContentRequest",
    "GeocodeSearch",
    "OfferDetailRequest",
    "OfferSearch",
    "enrich_available",
    "enrich_hotel",
    "enrich_offer",
    "extract_images",
    "has_inventory",
    "parse_request",
    "shape_content",
    "summarize_offer",
    "summarize_offer_group",
    "summarize_property",
]
