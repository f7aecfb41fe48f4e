import json
from decimal import Decimal
from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.core.coercion import coerce_decimal, coerce_float, coerce_int
from app.schemas.category import CategorySummary
from app.schemas.unit import UnitResponse


class PriceTierIn(BaseModel):
    # Older clients send {"name": ..., "value": ...}
    model_config = ConfigDict(populate_by_name=True)

    label: str | None = Field(None, validation_alias=AliasChoices("label", "name"))
    amount: Decimal | None = Field(None, validation_alias=AliasChoices("amount", "value"))

    @field_validator("label", mode="before")
    @classmethod
    def label_as_text(cls, value):
        if value is None:
            return None
        return str(value)

    @field_validator("amount", mode="before")
    @classmethod
    def tolerant_amount(cls, value):
        return coerce_decimal(value)


def _parse_prices(value):
    """Tier list from a list or a JSON-encoded string; ``None`` when absent."""
    if value is None:
        return None

    # Form-style clients post the tier list as a JSON-encoded string field
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise ValueError("Invalid format for prices. Expected JSON array.")

    if not isinstance(value, list):
        raise ValueError("Invalid format for prices. Expected JSON array.")

    return [tier for tier in value if isinstance(tier, (dict, PriceTierIn))]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _require_name(value):
    if value is None or not value.strip():
        raise ValueError("Product name is required")
    return value.strip()


class ProductCreate(BaseModel):
    name: str
    name_localized: str | None = None
    barcode: str | None = None
    rating: float | None = None

    stock_quantity: int = 0

    production_date: date | None = None
    expiry_date: date | None = None

    category_id: int | None = None
    subcategory_id: int | None = None
    unit_id: int | None = None

    image_url: str | None = None

    prices: list[PriceTierIn] = []

    @field_validator("name")
    @classmethod
    def name_required(cls, value):
        return _require_name(value)

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def tolerant_stock(cls, value):
        return max(coerce_int(value, default=0), 0)

    @field_validator("rating", mode="before")
    @classmethod
    def tolerant_rating(cls, value):
        return coerce_float(value)

    @field_validator("category_id", "subcategory_id", "unit_id", mode="before")
    @classmethod
    def tolerant_reference(cls, value):
        return coerce_int(value, default=None)

    @field_validator("production_date", "expiry_date", "name_localized", "barcode", "image_url", mode="before")
    @classmethod
    def blank_is_none(cls, value):
        return _blank_to_none(value)

    @field_validator("prices", mode="before")
    @classmethod
    def parse_prices(cls, value):
        return _parse_prices(value) or []


class ProductUpdate(BaseModel):
    name: str | None = None
    name_localized: str | None = None
    barcode: str | None = None
    rating: float | None = None

    # Current stock as the operator saw it; falls back to the stored value
    stock_quantity: int | None = None
    entered_amount: int = 0

    production_date: date | None = None
    expiry_date: date | None = None

    category_id: int | None = None
    subcategory_id: int | None = None
    unit_id: int | None = None

    image_url: str | None = None

    # Omitted or null: keep stored tiers. A list (even empty) replaces them all.
    prices: list[PriceTierIn] | None = None

    @field_validator("name")
    @classmethod
    def name_required(cls, value):
        return _require_name(value)

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def tolerant_stock(cls, value):
        return coerce_int(value, default=None)

    @field_validator("entered_amount", mode="before")
    @classmethod
    def tolerant_entered_amount(cls, value):
        return coerce_int(value, default=0)

    @field_validator("rating", mode="before")
    @classmethod
    def tolerant_rating(cls, value):
        return coerce_float(value)

    @field_validator("category_id", "subcategory_id", "unit_id", mode="before")
    @classmethod
    def tolerant_reference(cls, value):
        return coerce_int(value, default=None)

    @field_validator("production_date", "expiry_date", "name_localized", "barcode", "image_url", mode="before")
    @classmethod
    def blank_is_none(cls, value):
        return _blank_to_none(value)

    @field_validator("prices", mode="before")
    @classmethod
    def parse_prices(cls, value):
        return _parse_prices(value)


class PriceTierResponse(BaseModel):
    id: int
    label: str
    amount: float

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    id: int
    name: str
    name_localized: str | None
    barcode: str | None
    rating: float | None
    stock_quantity: int
    production_date: date | None
    expiry_date: date | None
    category_id: int | None
    subcategory_id: int | None
    unit_id: int | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime | None

    category: CategorySummary | None = None
    unit: UnitResponse | None = None
    prices: list[PriceTierResponse] = []

    class Config:
        from_attributes = True
