from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from shared.money import Money, PositiveMoney


class CatalogProductCreate(BaseModel):
    name: str = Field(min_length=2, max_length=200)
    price: PositiveMoney
    description: Optional[str] = Field(default=None, max_length=500)


class CatalogProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    price: Optional[PositiveMoney] = None
    description: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class CatalogProductResponse(BaseModel):
    id: int
    name: str
    price: Money
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
