from __future__ import annotations

import pytest

from hotel_gateway.suppliers.registry import (
    SUPPLIER_CODES,
    SupplierCode,
    SupplierCodeRegistry,
    merge_rate_codes,
)


@pytest.mark.parametrize(
    ("caller", "defaults", "limit", "expected"),
    [
        (None, ["APS", "PP6"], None, ["APS", "PP6"]),
        ([], [], None, []),
        (["ZZZ"], ["APS", "PP6"], None, ["ZZZ", "APS", "PP6"]),
        (["PP6", "ZZZ"], ["APS", "PP6"], None, ["PP6", "ZZZ", "APS"]),
        (["APS", "APS", " PP6 "], ["PP6"], None, ["APS", "PP6"]),
        (["", "  "], ["APS"], None, ["APS"]),
        (["aps"], ["APS"], None, ["aps", "APS"]),
        (["ZZZ", "YYY"], ["APS", "PP6", "3MF"], 3, ["ZZZ", "YYY", "APS"]),
        (["ZZZ", "YYY", "XXX"], ["APS"], 2, ["ZZZ", "YYY"]),
        (["APS"], ["APS", "PP6"], 1, ["APS"]),
        (None, ["APS", "PP6"], 0, []),
    ],
)
def test_merge_rate_codes(caller, defaults, limit, expected) -> None:
    assert merge_rate_codes(caller, defaults, limit=limit) == expected


def test_merge_rate_codes_is_duplicate_free() -> None:
    merged = merge_rate_codes(["B", "A", "B"], ["A", "C", "B", "C"])
    assert len(merged) == len(set(merged))


def test_merge_rate_codes_rejects_negative_limit() -> None:
    with pytest.raises(ValueError):
        merge_rate_codes(["A"], [], limit=-1)


def test_registry_defaults_to_every_known_code() -> None:
    registry = SupplierCodeRegistry()

    assert registry.default_codes() == [entry.code for entry in SUPPLIER_CODES]
    assert len(registry) == len(SUPPLIER_CODES)
    assert registry.default_codes()[:3] == ["APS", "PP6", "3MF"]


def test_registry_explicit_defaults_deduplicated_in_order() -> None:
    registry = SupplierCodeRegistry(default_codes=["1HZ", "APS", "1HZ", "NEW"])

    assert registry.default_codes() == ["1HZ", "APS", "NEW"]
    assert registry.is_active("NEW")
    assert not registry.is_active("PP6")
    assert registry.lookup("NEW") is None


def test_registry_lookup_is_exact_and_case_sensitive() -> None:
    registry = SupplierCodeRegistry()

    entry = registry.lookup("1HZ")
    assert entry is not None
    assert entry.program_name == "Hyatt Privé"
    assert registry.lookup("1hz") is None
    assert registry.lookup(None) is None
    assert "APS" in registry


def test_registry_rejects_duplicate_codes() -> None:
    with pytest.raises(ValueError, match="Duplicate supplier code 'APS'"):
        SupplierCodeRegistry([SupplierCode("APS", "A", "a"), SupplierCode("APS", "B", "b")])


def test_supplier_code_to_dict() -> None:
    entry = SupplierCode("XYZ", "Program", "Desc", ("Breakfast", "Credit"))
    assert entry.to_dict() == {
        "code": "XYZ",
        "name": "Program",
        "description": "Desc",
        "benefits": ["Breakfast", "Credit"],
    }
