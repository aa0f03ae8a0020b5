"""Negotiated / consortium rate codes and the default set injected into offer searches."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence


@dataclass(frozen=True, slots=True)
class SupplierCode:
    """Display metadata for a negotiated rate program."""

    code: str
    program_name: str
    description: str
    benefits: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "name": self.program_name,
            "description": self.description,
            "benefits": list(self.benefits),
        }


SUPPLIER_CODES: tuple[SupplierCode, ...] = (
    SupplierCode(
        "APS",
        "Virtuoso",
        "Exclusive luxury travel network – VIP amenities and upgrades",
        ("Daily breakfast for two", "Room upgrade on arrival, subject to availability", "Property credit"),
    ),
    SupplierCode(
        "PP6",
        "Four Seasons Preferred Partner",
        "Exclusive benefits at Four Seasons properties",
        ("Daily breakfast for two", "Upgrade on arrival, subject to availability", "Resort or hotel credit"),
    ),
    SupplierCode(
        "3MF",
        "Mandarin Oriental Fan Club",
        "Fan Club benefits at Mandarin Oriental properties worldwide",
        ("Daily breakfast for two", "Property credit", "Early check-in and late check-out"),
    ),
    SupplierCode(
        "1HZ",
        "Hyatt Privé",
        "Exclusive amenities at Hyatt Hotels via Privé program",
        ("Daily breakfast for two", "Hotel credit", "Upgrade on arrival, subject to availability"),
    ),
    SupplierCode(
        "W9E",
        "SLH (Small Luxury Hotels)",
        "Boutique luxury experiences through Small Luxury Hotels",
        ("Welcome amenity", "Upgrade on arrival, subject to availability"),
    ),
    SupplierCode(
        "PR2",
        "Preferred Hotels & Resorts",
        "Preferred Hotels iPrefer benefits and amenities",
        ("iPrefer points", "Complimentary Wi-Fi"),
    ),
    SupplierCode("RAC", "Rack Rate", "Standard published hotel rate"),
    SupplierCode("AAA", "AAA Rate", "Special rates for AAA/CAA members"),
    SupplierCode("BED", "Bed & Breakfast", "Rate including daily breakfast", ("Daily breakfast",)),
    SupplierCode("PFK", "Package Rate", "Special package with additional amenities"),
)


def _dedupe(codes: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for code in codes:
        cleaned = (code or "").strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def merge_rate_codes(
    caller_codes: Optional[Iterable[str]],
    default_codes: Iterable[str],
    *,
    limit: Optional[int] = None,
) -> list[str]:
    """Return caller codes followed by defaults, deduplicated by first occurrence.

    When ``limit`` is set the list is cut to that many codes; caller codes come
    first so they always survive truncation ahead of any default.
    """
    merged = _dedupe([*(caller_codes or ()), *default_codes])
    if limit is not None:
        if limit < 0:
            raise ValueError("limit must be non-negative")
        merged = merged[:limit]
    return merged


class SupplierCodeRegistry:
    """Read-only lookup of known rate programs keyed by exact (case-sensitive) code."""

    def __init__(
        self,
        entries: Iterable[SupplierCode] = SUPPLIER_CODES,
        *,
        default_codes: Optional[Sequence[str]] = None,
    ) -> None:
        by_code: dict[str, SupplierCode] = {}
        for entry in entries:
            if entry.code in by_code:
                raise ValueError(f"Duplicate supplier code '{entry.code}'")
            by_code[entry.code] = entry
        self._entries: Mapping[str, SupplierCode] = by_code
        if default_codes:
            self._defaults = tuple(_dedupe(default_codes))
        else:
            self._defaults = tuple(by_code)

    def default_codes(self) -> list[str]:
        return list(self._defaults)

    def lookup(self, code: Optional[str]) -> Optional[SupplierCode]:
        if not code:
            return None
        return self._entries.get(code)

    def all_entries(self) -> list[SupplierCode]:
        return list(self._entries.values())

    def is_active(self, code: str) -> bool:
        return code in self._defaults

    def __contains__(self, code: object) -> bool:
        return code in self._entries

    def __len__(self) -> int:
        return len(self._entries)
