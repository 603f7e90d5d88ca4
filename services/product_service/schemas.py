from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from shared.money import Money, PositiveMoney


class ProductCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    price: PositiveMoney
    stock_quantity: int = Field(ge=0)


class ProductUpdate(BaseModel):
    """Administrative update. Stock is owned by order placement and cancellation."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    price: Optional[PositiveMoney] = None

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: Money
    stock_quantity: int

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasMore: bool


class ProductPage(BaseModel):
    success: bool = True
    products: List[ProductResponse]
    pagination: Pagination
