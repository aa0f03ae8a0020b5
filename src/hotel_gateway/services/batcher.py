"""Batched multi-hotel pricing with rate-code injection and per-batch failure isolation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx

from hotel_gateway.core.errors import PartialBatchFailure, UpstreamError
from hotel_gateway.hotels.enrichment import enrich_available
from hotel_gateway.hotels.requests import OfferSearch
from hotel_gateway.services.hotel_client import HotelApiClient
from hotel_gateway.suppliers.registry import SupplierCodeRegistry, merge_rate_codes
from hotel_gateway.utils import throttling

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


def chunk_ids(ids: Sequence[str], size: int) -> List[List[str]]:
    if size < 1:
        raise ValueError("size must be positive")
    return [list(ids[start : start + size]) for start in range(0, len(ids), size)]


@dataclass(slots=True)
class BatchFailure:
    """One pricing batch that could not be completed."""

    index: int
    hotel_ids: List[str]
    error: str
    status: Optional[int] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "batch": self.index,
            "hotelIds": list(self.hotel_ids),
            "error": self.error,
            "status": self.status,
        }


@dataclass(slots=True)
class BatchResult:
    """Hotels with bookable offers, in batch order, plus any batches that failed."""

    hotels: List[Dict[str, Any]] = field(default_factory=list)
    failures: List[BatchFailure] = field(default_factory=list)
    batches: int = 0
    rate_codes: List[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failures)


class OfferBatcher:
    def __init__(
        self,
        api: HotelApiClient,
        registry: SupplierCodeRegistry,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        delay_s: float = 0.1,
        max_rate_codes: Optional[int] = None,
        default_payment_policy: str = "NONE",
    ) -> None:
        self._api = api
        self._registry = registry
        self._batch_size = batch_size
        self._delay_s = delay_s
        self._max_rate_codes = max_rate_codes
        self._default_payment_policy = default_payment_policy

    def rate_codes_for(self, search: OfferSearch) -> List[str]:
        return merge_rate_codes(search.rate_codes, self._registry.default_codes(), limit=self._max_rate_codes)

    def build_query(self, search: OfferSearch, hotel_ids: Sequence[str], rate_codes: Sequence[str]) -> Dict[str, str]:
        query = {
            "hotelIds": ",".join(hotel_ids),
            "adults": str(search.adults),
            "checkInDate": search.check_in_date.isoformat(),
            "checkOutDate": search.check_out_date.isoformat(),
            "roomQuantity": str(search.room_quantity),
            "paymentPolicy": search.payment_policy or self._default_payment_policy,
            "includeClosed": "false",
            "view": "FULL",
            "bestRateOnly": "false",
        }
        if search.currency:
            query["currency"] = search.currency
        if search.price_range:
            query["priceRange"] = search.price_range
        if search.board_type:
            query["boardType"] = search.board_type
        if search.lang:
            query["lang"] = search.lang
        if rate_codes:
            query["rateCodes"] = ",".join(rate_codes)
        return query

    async def fetch(self, search: OfferSearch) -> BatchResult:
        batches = chunk_ids(search.hotel_ids, self._batch_size)
        rate_codes = self.rate_codes_for(search)
        result = BatchResult(batches=len(batches), rate_codes=rate_codes)
        if not batches:
            return result

        logger.info(
            "Pricing %s hotels in %s batch(es) for %s → %s with %s rate codes",
            len(search.hotel_ids),
            len(batches),
            search.check_in_date,
            search.check_out_date,
            len(rate_codes),
        )
        # AuthenticationError is not a batch failure; it aborts the whole fetch.
        for position, hotel_ids in enumerate(batches):
            index = position + 1
            try:
                hotels = await self._api.hotel_offers(self.build_query(search, hotel_ids, rate_codes))
            except (UpstreamError, httpx.HTTPError) as exc:
                status = getattr(exc, "status", None)
                logger.error(
                    "Batch %s/%s failed (%s): %s",
                    index,
                    len(batches),
                    status or "no status",
                    getattr(exc, "payload", None) or exc,
                )
                result.failures.append(BatchFailure(index, hotel_ids, str(exc), status))
            else:
                available = enrich_available(hotels, self._registry)
                logger.debug("Batch %s/%s returned %s hotels, %s available", index, len(batches), len(hotels), len(available))
                result.hotels.extend(available)

            if position < len(batches) - 1:
                await throttling.pace(self._delay_s)

        if result.failures:
            summary = PartialBatchFailure([failure.index for failure in result.failures], len(batches))
            logger.warning("%s", summary)
        return result
