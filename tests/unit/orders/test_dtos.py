"""Unit tests for Order DTOs.

Covers:
- CreateOrderItemDTO: alias handling, quantity validation, immutability.
- CreateOrderDTO: empty orders and duplicate products.
"""

from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.core.errors import pydantic_detail
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

pytestmark = pytest.mark.unit


# ===========================================================================
# CreateOrderItemDTO
# ===========================================================================


class TestCreateOrderItemDTO:
    def test_accepts_camel_case_alias(self):
        pid = uuid4()
        dto = CreateOrderItemDTO.model_validate({"productId": str(pid), "quantity": 2})
        assert dto.product_id == pid
        assert dto.quantity == 2

    def test_accepts_field_name(self):
        dto = CreateOrderItemDTO(product_id=uuid4(), quantity=1)
        assert dto.quantity == 1

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_quantity_below_one(self, quantity):
        with pytest.raises(ValidationError, match="Quantity must be at least 1"):
            CreateOrderItemDTO(product_id=uuid4(), quantity=quantity)

    @pytest.mark.parametrize("quantity", [True, "3", 2.0])
    def test_quantity_must_be_a_real_integer(self, quantity):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO.model_validate({"productId": str(uuid4()), "quantity": quantity})

    def test_malformed_product_id(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO.model_validate({"productId": "nope", "quantity": 1})

    def test_frozen(self):
        dto = CreateOrderItemDTO(product_id=uuid4(), quantity=1)
        with pytest.raises(ValidationError):
            dto.quantity = 5


# ===========================================================================
# CreateOrderDTO
# ===========================================================================


class TestCreateOrderDTO:
    def test_keeps_line_order(self):
        items = [CreateOrderItemDTO(product_id=uuid4(), quantity=i) for i in (1, 2, 3)]
        dto = CreateOrderDTO(user_id=uuid4(), items=items)
        assert [i.quantity for i in dto.items] == [1, 2, 3]

    def test_empty_order(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateOrderDTO(user_id=uuid4(), items=[])
        assert pydantic_detail(exc_info.value) == "Order must contain at least one item"

    def test_duplicate_products(self):
        pid = uuid4()
        items = [
            CreateOrderItemDTO(product_id=pid, quantity=1),
            CreateOrderItemDTO(product_id=pid, quantity=2),
        ]
        with pytest.raises(ValidationError) as exc_info:
            CreateOrderDTO(user_id=uuid4(), items=items)
        assert pydantic_detail(exc_info.value) == (
            "Duplicate product IDs are not allowed in the same order."
        )
