import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from categories import category_type
from models import (
    ProductCategory,
    TransactionCategory,
    TransactionType,
    UnitMeasure,
)


class PlanningListIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be empty")
        return value


class TransactionIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    type: TransactionType
    category_id: TransactionCategory
    date: Optional[dt.date] = None
    is_paid: bool = False
    observation: Optional[str] = Field(default=None, max_length=500)

    @field_validator("observation")
    @classmethod
    def _blank_observation(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _category_matches_type(self) -> "TransactionIn":
        if category_type(self.category_id) != self.type:
            raise ValueError(
                f"Category {self.category_id.value} does not belong to {self.type.value}"
            )
        return self


class PaidStatusIn(BaseModel):
    is_paid: bool


class ShoppingListIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    budget: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be empty")
        return value


class ShoppingItemIn(BaseModel):
    product_id: str = Field(..., min_length=1, max_length=36)
    quantity: Decimal = Field(
        default=Decimal("1"), gt=0, max_digits=10, decimal_places=3
    )
    price: Optional[Decimal] = Field(
        default=None, ge=0, max_digits=12, decimal_places=2
    )


class ShoppingItemUpdate(BaseModel):
    quantity: Decimal = Field(..., gt=0, max_digits=10, decimal_places=3)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    brand: Optional[str] = Field(default=None, max_length=120)
    category: ProductCategory
    unit: UnitMeasure = UnitMeasure.un

    @field_validator("brand")
    @classmethod
    def _blank_brand(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None
