from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from shared.money import Money

OrderStatusValue = Literal["pending", "processing", "completed", "cancelled"]


class FederatedOrderCreate(BaseModel):
    userId: int = Field(gt=0)
    productId: int = Field(gt=0)
    quantity: int = Field(ge=1)


class FederatedOrderUpdate(BaseModel):
    quantity: Optional[int] = Field(default=None, ge=1)
    status: Optional[OrderStatusValue] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if self.quantity is None and self.status is None:
            raise ValueError("At least one of quantity or status must be provided")
        return self


# --- Collaborator payloads ---

class UserSnapshot(BaseModel):
    id: int
    name: str
    email: str


class ProductSnapshot(BaseModel):
    id: int
    name: str
    price: Money
    description: Optional[str] = None


class FederatedOrderResponse(BaseModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    total_price: Money
    status: str
    created_at: Optional[datetime] = None
    # Present only when enrichment succeeded; recomputed on every read
    user: Optional[UserSnapshot] = None
    product: Optional[ProductSnapshot] = None
    enriched: bool = False

    class Config:
        from_attributes = True
