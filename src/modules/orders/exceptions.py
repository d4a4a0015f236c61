"""Order domain exceptions.

Raised by the Service Layer; views translate them into HTTP responses.
Any of them raised inside ``OrderService.create_order`` rolls back the
whole order.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The order does not exist or belongs to another user."""


class ProductNotFound(Exception):
    """A product referenced by an order line does not exist or was deleted."""


class InsufficientStock(Exception):
    """Not enough stock to fulfil an order line."""

    def __init__(self, product_name: str, available: int, requested: int) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_name}: "
            f"available {available}, requested {requested}"
        )
