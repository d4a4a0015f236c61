"""Product DTOs for the Service Layer.

Immutable Pydantic v2 models built by the views from JSON or multipart
input.  Numeric strings coming from multipart forms are coerced.

- ``CreateProductDTO``: every field required.
- ``UpdateProductDTO``: every field optional; supplied strings must not
  be blank.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

MAX_PRICE = Decimal("99999999.99")
CENT = Decimal("0.01")
MAX_STOCK = 2147483647
TEXT_MAX_LENGTH = {"name": 255, "category": 100}


def _check_price(v: Decimal) -> Decimal:
    if v <= 0:
        raise ValueError("Price must be a positive number.")
    if v > MAX_PRICE:
        raise ValueError(f"Price must not exceed {MAX_PRICE}.")
    if v != v.quantize(CENT):
        raise ValueError("Price must have at most two decimal places.")
    return v.quantize(CENT)


def _check_stock(v: int) -> int:
    if v < 0:
        raise ValueError("Stock must be a non-negative integer.")
    if v > MAX_STOCK:
        raise ValueError(f"Stock must not exceed {MAX_STOCK}.")
    return v


def _check_text(v: str, info: ValidationInfo) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{info.field_name.capitalize()} must not be empty.")
    limit = TEXT_MAX_LENGTH.get(info.field_name)
    if limit is not None and len(v) > limit:
        raise ValueError(
            f"{info.field_name.capitalize()} must be at most {limit} characters."
        )
    return v


class CreateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    price: Decimal
    stock: int
    category: str

    @field_validator("name", "description", "category")
    @classmethod
    def text_must_not_be_blank(cls, v: str, info: ValidationInfo) -> str:
        return _check_text(v, info)

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        return _check_stock(v)


class UpdateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None
    category: Optional[str] = None

    @field_validator("name", "description", "category")
    @classmethod
    def text_must_not_be_blank(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if v is None:
            return v
        return _check_text(v, info)

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return v if v is None else _check_price(v)

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        return v if v is None else _check_stock(v)

    def changes(self) -> dict:
        """Only the fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)
