from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from shared.money import Money


class OrderCreate(BaseModel):
    shipping_address: str = Field(max_length=500)
    payment_method: str = Field(max_length=50)

    @field_validator("shipping_address", "payment_method")
    @classmethod
    def not_blank(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            label = info.field_name.replace("_", " ").capitalize()
            raise ValueError(f"{label} required")
        return value


class OrderPlacedResponse(BaseModel):
    success: bool = True
    message: str = "Order placed successfully"
    orderId: int


class OrderSummary(BaseModel):
    id: int
    total_amount: Money
    shipping_address: str
    payment_method: str
    status: str
    created_at: Optional[datetime]
    item_count: int = 0

    class Config:
        from_attributes = True


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    name: str
    quantity: int
    price: Money


class OrderListResponse(BaseModel):
    success: bool = True
    orders: List[OrderSummary]


class OrderDetailResponse(BaseModel):
    success: bool = True
    order: OrderSummary
    items: List[OrderItemResponse]
