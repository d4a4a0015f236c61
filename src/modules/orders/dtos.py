"""Order DTOs for the Service Layer.

- ``CreateOrderItemDTO``: one ``{productId, quantity}`` line.
- ``CreateOrderDTO``: the whole order; lines keep the request order,
  which is also the order in which product rows are locked.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateOrderItemDTO(BaseModel):
    """A single line; ``productId`` is accepted as an alias.

    ``quantity`` is never coerced; only a JSON integer is accepted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: UUID = Field(alias="productId")
    quantity: int = Field(strict=True)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Validates that the order has lines and no product repeats."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_be_unique_and_present(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must contain at least one item")
        product_ids = [item.product_id for item in v]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return v
