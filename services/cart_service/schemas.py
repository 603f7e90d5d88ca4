from typing import List

from pydantic import BaseModel, Field

from shared.money import Money

# Per-line bound enforced by the cart; orders inherit it through the cart.
MAX_LINE_QUANTITY = 99


class CartItemAdd(BaseModel):
    product_id: int = Field(ge=1)
    quantity: int = Field(ge=1, le=MAX_LINE_QUANTITY)


class CartItemUpdate(BaseModel):
    quantity: int = Field(ge=1, le=MAX_LINE_QUANTITY)


class CartItemResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    name: str
    price: Money
    stock_quantity: int
    available: bool


class CartResponse(BaseModel):
    success: bool = True
    cart: List[CartItemResponse]
    subtotal: Money
    itemCount: int
