"""Caller-facing input models for the hotel operations."""
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Literal, Mapping, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from hotel_gateway.core.errors import ValidationError

MIN_RADIUS = 1
MAX_RADIUS = 100
DEFAULT_RADIUS = 20

RadiusUnit = Literal["KM", "MILE"]
HotelSource = Literal["BEDBANK", "DIRECTCHAIN", "ALL"]
PaymentPolicy = Literal["GUARANTEE", "DEPOSIT", "NONE"]
BoardType = Literal["ROOM_ONLY", "BREAKFAST", "HALF_BOARD", "FULL_BOARD", "ALL_INCLUSIVE"]

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce_string_list(value: object) -> list[str]:
    if value in (None, "", ()):
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Iterable):
        result: list[str] = []
        for item in value:
            text = str(item).strip()
            if text:
                result.append(text)
        return result
    raise TypeError("Expected string or list of strings")


def clamp_radius(value: object) -> int:
    if value is None or value == "":
        return DEFAULT_RADIUS
    try:
        radius = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError("radius must be a number") from exc
    return int(round(min(max(MIN_RADIUS, radius), MAX_RADIUS)))


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PropertyFilters(_Request):
    """Optional filters shared by the city and geocode searches."""

    radius: int = DEFAULT_RADIUS
    radius_unit: RadiusUnit = "KM"
    chain_codes: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    ratings: list[str] = Field(default_factory=list)
    hotel_source: HotelSource = "ALL"

    @field_validator("radius", mode="before")
    @classmethod
    def _clamp_radius(cls, value: object) -> int:
        return clamp_radius(value)

    @field_validator("radius_unit", "hotel_source", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("chain_codes", "amenities", "ratings", mode="before")
    @classmethod
    def _coerce_lists(cls, value: object) -> list[str]:
        return _coerce_string_list(value)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value not in (None, "")}
        return data

    def to_query(self) -> dict[str, object]:
        query: dict[str, object] = {
            "radius": self.radius,
            "radiusUnit": self.radius_unit,
            "hotelSource": self.hotel_source,
        }
        if self.chain_codes:
            query["chainCodes"] = ",".join(self.chain_codes)
        if self.amenities:
            query["amenities"] = ",".join(self.amenities)
        if self.ratings:
            query["ratings"] = ",".join(self.ratings)
        return query


class CitySearch(PropertyFilters):
    city_code: str = Field(min_length=1)

    @field_validator("city_code", mode="before")
    @classmethod
    def _normalise_city(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    def to_query(self) -> dict[str, object]:
        return {"cityCode": self.city_code, **super().to_query()}


class GeocodeSearch(PropertyFilters):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_query(self) -> dict[str, object]:
        return {"latitude": self.latitude, "longitude": self.longitude, **super().to_query()}


class OfferSearch(_Request):
    """Live pricing request for one or more properties."""

    hotel_ids: list[str] = Field(min_length=1)
    check_in_date: date
    check_out_date: date
    adults: int = Field(default=1, ge=1, le=9)
    room_quantity: int = Field(default=1, ge=1, le=9)
    currency: Optional[str] = None
    price_range: Optional[str] = None
    rate_codes: list[str] = Field(default_factory=list)
    payment_policy: Optional[PaymentPolicy] = None
    board_type: Optional[BoardType] = None
    lang: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value not in (None, "")}
        return data

    @field_validator("hotel_ids", mode="before")
    @classmethod
    def _coerce_hotel_ids(cls, value: object) -> list[str]:
        return _coerce_string_list(value)

    @field_validator("rate_codes", mode="before")
    @classmethod
    def _coerce_rate_codes(cls, value: object) -> list[str]:
        return _coerce_string_list(value)

    @field_validator("currency", "payment_policy", "board_type", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or None
        return value

    @model_validator(mode="after")
    def _check_stay(self) -> "OfferSearch":
        if self.check_out_date <= self.check_in_date:
            raise ValueError("checkOutDate must be after checkInDate")
        return self

    @property
    def nights(self) -> int:
        return (self.check_out_date - self.check_in_date).days


class OfferDetailRequest(_Request):
    offer_id: str = Field(min_length=1)
    lang: Optional[str] = None

    @field_validator("offer_id", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class ContentRequest(_Request):
    hotel_id: str = Field(min_length=1)

    @field_validator("hotel_id", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


def _describe(error: Mapping[str, Any]) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
    if error.get("type") == "missing":
        return f"{field} is required"
    message = str(error.get("msg", "invalid value"))
    message = message.removeprefix("Value error, ")
    if not field:
        return message
    if error.get("type") in ("string_too_short", "too_short"):
        return f"{field} is required"
    return f"{field}: {message}"


def parse_request(model: Type[ModelT], arguments: Optional[Mapping[str, Any]]) -> ModelT:
    """Validate raw tool arguments, raising :class:`ValidationError` with readable messages."""
    try:
        return model.model_validate(dict(arguments or {}))
    except pydantic.ValidationError as exc:
        messages = [_describe(error) for error in exc.errors()]
        raise ValidationError("; ".join(dict.fromkeys(messages))) from exc
