"""Negotiated rate program registry."""

from .registry import SUPPLIER_CODES, SupplierCode, SupplierCodeRegistry, merge_rate_codes

__all__ = [
    "SUPPLIER_CODES",
    "SupplierCode",
    "SupplierCodeRegistry",
    "merge_rate_codes",
]
