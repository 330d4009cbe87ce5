from datetime import datetime
from typing import List, Optional
from pydantic import ConfigDict, Field, field_validator

from .inventory_schemas import CamelModel, coerce_int, coerce_stock


class ProductSnapshot(CamelModel):
    """Product attributes as the client saw them when the order was placed."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    price: float = 0
    stock_quantity: int = 0
    image: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def clean_id(cls, value):
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("price", mode="before")
    @classmethod
    def clean_price(cls, value):
        try:
            return float(value or 0)
        except (TypeError, ValueError):
            return 0

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def clamp_stock(cls, value):
        return coerce_stock(value)


class OrderItem(CamelModel):
    product: ProductSnapshot = Field(default_factory=ProductSnapshot)
    quantity: int = 0

    # a line without a product is kept and later skipped by the ledger
    @field_validator("product", mode="before")
    @classmethod
    def empty_product(cls, value):
        return {} if value is None else value

    @field_validator("quantity", mode="before")
    @classmethod
    def clean_quantity(cls, value):
        return coerce_int(value)


class CustomerInfo(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    zip_code: Optional[str] = None

    def is_complete(self) -> bool:
        return all(
            (value or "").strip()
            for value in (self.full_name, self.email, self.phone, self.address, self.zip_code)
        )


class OfflineOrderCreate(CamelModel):
    items: Optional[List[OrderItem]] = None
    customer: Optional[CustomerInfo] = None
    payment_method: Optional[str] = None


class OfflineOrderOut(CamelModel):
    order_id: str


class Order(CamelModel):
    id: str
    payment_method: str
    customer: CustomerInfo
    items: List[OrderItem]
    total: float
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    cancel_reason: Optional[str] = None


class OrderStatusUpdate(CamelModel):
    status: Optional[str] = None


class OrderListOut(CamelModel):
    orders: List[Order]


class OrderOut(CamelModel):
    order: Order
