from __future__ import annotations

from datetime import date

import httpx
import pytest

from conftest import hotel_entry

from hotel_gateway.core.errors import AuthenticationError
from hotel_gateway.hotels.requests import OfferSearch
from hotel_gateway.services.batcher import chunk_ids


def _search(hotel_ids: list[str], **overrides) -> OfferSearch:
    values = {
        "hotel_ids": hotel_ids,
        "check_in_date": date(2025, 6, 1),
        "check_out_date": date(2025, 6, 3),
        **overrides,
    }
    return OfferSearch.model_validate(values)


def _echo_hotels(params: dict[str, str], _call: int) -> httpx.Response:
    return httpx.Response(200, json={"data": [hotel_entry(hotel_id) for hotel_id in params["hotelIds"].split(",")]})


def test_chunk_ids_preserves_order() -> None:
    ids = [f"H{index}" for index in range(7)]
    assert chunk_ids(ids, 3) == [["H0", "H1", "H2"], ["H3", "H4", "H5"], ["H6"]]
    assert chunk_ids([], 20) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(("count", "expected_calls"), [(1, 1), (20, 1), (21, 2), (45, 3), (60, 3)])
async def test_one_pricing_call_per_chunk(make_context, fake_upstream, count, expected_calls) -> None:
    fake_upstream.offer_handler = _echo_hotels
    context = make_context()
    ids = [f"HOTEL{index:03d}" for index in range(count)]

    result = await context.batcher.fetch(_search(ids))

    assert len(fake_upstream.offer_params) == expected_calls
    sent = [params["hotelIds"].split(",") for params in fake_upstream.offer_params]
    assert all(len(batch) <= 20 for batch in sent)
    assert [hotel_id for batch in sent for hotel_id in batch] == ids
    assert [hotel["hotel"]["hotelId"] for hotel in result.hotels] == ids
    assert result.batches == expected_calls


@pytest.mark.asyncio
async def test_empty_id_list_makes_no_calls(make_context, fake_upstream) -> None:
    context = make_context()
    search = OfferSearch.model_construct(
        hotel_ids=[],
        check_in_date=date(2025, 6, 1),
        check_out_date=date(2025, 6, 3),
        adults=1,
        room_quantity=1,
        rate_codes=[],
        payment_policy=None,
        currency=None,
        price_range=None,
        board_type=None,
        lang=None,
    )

    result = await context.batcher.fetch(search)

    assert result.hotels == []
    assert result.failures == []
    assert fake_upstream.requests == []


@pytest.mark.asyncio
async def test_failed_middle_batch_is_skipped(make_context, fake_upstream) -> None:
    def handler(params: dict[str, str], call: int) -> httpx.Response:
        if call == 2:
            return httpx.Response(500, json={"errors": [{"code": 141, "title": "SYSTEM ERROR HAS OCCURRED"}]})
        return _echo_hotels(params, call)

    fake_upstream.offer_handler = handler
    context = make_context(batch_size=2)

    result = await context.batcher.fetch(_search(["A", "B", "C", "D", "E", "F"]))

    assert [hotel["hotel"]["hotelId"] for hotel in result.hotels] == ["A", "B", "E", "F"]
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.index == 2
    assert failure.hotel_ids == ["C", "D"]
    assert failure.status == 500
    assert result.partial


@pytest.mark.asyncio
async def test_timed_out_batch_counts_as_failure(make_context, fake_upstream) -> None:
    def handler(params: dict[str, str], call: int) -> httpx.Response:
        if call == 1:
            raise httpx.ReadTimeout("timed out")
        return _echo_hotels(params, call)

    fake_upstream.offer_handler = handler
    context = make_context(batch_size=1)

    result = await context.batcher.fetch(_search(["A", "B"]))

    assert [hotel["hotel"]["hotelId"] for hotel in result.hotels] == ["B"]
    assert [failure.index for failure in result.failures] == [1]
    assert "timed out" in result.failures[0].error


@pytest.mark.asyncio
async def test_pacing_between_batches_only(make_context, fake_upstream, monkeypatch: pytest.MonkeyPatch) -> None:
    pauses: list[float] = []

    async def fake_pace(seconds: float) -> None:
        pauses.append(seconds)

    monkeypatch.setattr("hotel_gateway.utils.throttling.pace", fake_pace)
    fake_upstream.offer_handler = _echo_hotels
    context = make_context(batch_size=2, batch_delay_s=0.1)

    await context.batcher.fetch(_search(["A", "B", "C", "D", "E"]))
    assert pauses == [0.1, 0.1]

    pauses.clear()
    await context.batcher.fetch(_search(["A"]))
    assert pauses == []


@pytest.mark.asyncio
async def test_unavailable_hotels_are_dropped(make_context, fake_upstream) -> None:
    fake_upstream.offer_handler = lambda params, call: httpx.Response(
        200,
        json={
            "data": [
                hotel_entry("A", available=False),
                {**hotel_entry("B"), "offers": []},
                hotel_entry("C", rate_codes=("APS", "ZZZ")),
            ]
        },
    )
    context = make_context()

    result = await context.batcher.fetch(_search(["A", "B", "C"]))

    assert [hotel["hotel"]["hotelId"] for hotel in result.hotels] == ["C"]
    offers = result.hotels[0]["offers"]
    assert [offer["isNegotiatedRate"] for offer in offers] == [True, False]
    assert offers[0]["supplierName"] == "Virtuoso"


@pytest.mark.asyncio
async def test_query_carries_stay_filters_and_merged_rate_codes(make_context, fake_upstream) -> None:
    context = make_context(rate_codes="APS,PP6,3MF", max_rate_codes=3, payment_policy="GUARANTEE")

    result = await context.batcher.fetch(
        _search(
            ["A", "B"],
            adults=2,
            room_quantity=1,
            currency="EUR",
            board_type="BREAKFAST",
            rate_codes=["ZZZ", "PP6"],
        )
    )

    params = fake_upstream.offer_params[0]
    assert params == {
        "hotelIds": "A,B",
        "adults": "2",
        "checkInDate": "2025-06-01",
        "checkOutDate": "2025-06-03",
        "roomQuantity": "1",
        "paymentPolicy": "GUARANTEE",
        "includeClosed": "false",
        "view": "FULL",
        "bestRateOnly": "false",
        "currency": "EUR",
        "boardType": "BREAKFAST",
        "rateCodes": "ZZZ,PP6,APS",
    }
    assert result.rate_codes == ["ZZZ", "PP6", "APS"]


@pytest.mark.asyncio
async def test_caller_payment_policy_overrides_default(make_context, fake_upstream) -> None:
    context = make_context()

    await context.batcher.fetch(_search(["A"], payment_policy="deposit"))

    assert fake_upstream.offer_params[0]["paymentPolicy"] == "DEPOSIT"
    assert fake_upstream.offer_params[0]["rateCodes"].split(",")[0] == "APS"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "malformed",
    [
        {"data": {"hotelId": "X"}},
        {"data": ["X"]},
        {"data": [{"hotel": {"hotelId": "X"}, "available": True, "offers": "none"}]},
    ],
)
async def test_malformed_batch_body_is_isolated(make_context, fake_upstream, malformed) -> None:
    def handler(params: dict[str, str], call: int) -> httpx.Response:
        if call == 2:
            return httpx.Response(200, json=malformed)
        return _echo_hotels(params, call)

    fake_upstream.offer_handler = handler
    context = make_context(batch_size=1)

    result = await context.batcher.fetch(_search(["A", "B", "C"]))

    assert [hotel["hotel"]["hotelId"] for hotel in result.hotels] == ["A", "C"]
    assert [failure.index for failure in result.failures] == [2]
    assert result.failures[0].hotel_ids == ["B"]


@pytest.mark.asyncio
async def test_rejected_credentials_abort_fetch_without_retry(make_context, fake_upstream) -> None:
    fake_upstream.token_status = 401
    fake_upstream.offer_handler = _echo_hotels
    context = make_context()

    with pytest.raises(AuthenticationError):
        await context.batcher.fetch(_search([f"HOTEL{index:03d}" for index in range(60)]))

    assert len(fake_upstream.token_requests) == 1
    assert fake_upstream.offer_params == []
