import math
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, computed_field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def coerce_int(value: Any, default: int = 0) -> int:
    """Best-effort int conversion; anything unusable becomes the default."""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def coerce_stock(value: Any) -> int:
    # negative or corrupted stock is treated as sold out, never as an error
    return max(0, coerce_int(value))


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class InventoryRecord(CamelModel):
    # unknown document keys are carried through reads and rewrites
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    stock_quantity: int = 0
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def drop_stored_flag(cls, data):
        if isinstance(data, dict):
            data = {k: v for k, v in data.items() if k not in ("inStock", "in_stock")}
        return data

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def clamp_stock(cls, value):
        return coerce_stock(value)

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, value):
        return "" if value is None else str(value)

    # derived on every read and write; a stored inStock flag is never trusted
    @computed_field(alias="inStock")
    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


class ProductAvailability(CamelModel):
    in_stock: bool
    stock_quantity: int


class AvailabilityOut(BaseModel):
    availability: Dict[str, ProductAvailability]


class CatalogProduct(CamelModel):
    id: str
    name: str
    stock_quantity: int = 0

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def clamp_stock(cls, value):
        return coerce_stock(value)


class CatalogSyncResult(BaseModel):
    catalog_products: int
    inserted: int
    updated: int
    deleted: int
