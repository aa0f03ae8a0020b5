"""Service clients for the Amadeus hotel APIs."""

from .batcher import BatchFailure, BatchResult, OfferBatcher, chunk_ids
from .hotel_client import HotelApiClient

__all__ = [
    "BatchFailure",
    "BatchResult",
    "HotelApiClient",
    "OfferBatcher",
    "chunk_ids",
]
