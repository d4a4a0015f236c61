"""Order service layer (Use Cases).

``create_order`` is the one place where stock changes.  It runs in a
single database transaction and follows lock, check, write, commit:

1. Lock every referenced product row (``SELECT ... FOR UPDATE``) in the
   order the lines appear in the request.
2. Verify each product exists, is not deleted and has enough stock.
3. Deduct stock and persist the order with price snapshots.
4. Commit; the cached product listings are dropped afterwards.

Any failure raises out of the ``atomic`` block, so no order row, no
order line and no stock change survives a rejected order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

import structlog
from django.db import models, transaction

from modules.orders.exceptions import InsufficientStock, OrderNotFound, ProductNotFound
from modules.products.cache import invalidate_product_cache_on_commit

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place an order and deduct stock atomically.

        Raises:
            ProductNotFound: a product does not exist or was deleted.
            InsufficientStock: a product has less stock than requested.
        """
        log = logger.bind(user_id=str(dto.user_id), line_count=len(dto.items))
        log.info("order.creation_started")

        # 1 + 2: lock in request order, then check
        locked: List[Product] = []
        for item in dto.items:
            product = self._product_repo.get_for_update(str(item.product_id))
            if product is None:
                log.warning("order.product_missing", product_id=str(item.product_id))
                raise ProductNotFound(f"Product {item.product_id} not found")
            if product.stock < item.quantity:
                log.warning(
                    "order.insufficient_stock",
                    product_id=str(product.id),
                    available=product.stock,
                    requested=item.quantity,
                )
                raise InsufficientStock(product.name, product.stock, item.quantity)
            locked.append(product)

        # 3: write
        lines: List[Dict[str, Any]] = []
        for product, item in zip(locked, dto.items):
            product.stock -= item.quantity
            product.save(update_fields=["stock"])
            lines.append(
                {
                    "product_id": product.id,
                    "quantity": item.quantity,
                    "price": product.price,
                }
            )
            log.info(
                "order.stock_deducted",
                product_id=str(product.id),
                quantity=item.quantity,
                remaining=product.stock,
            )

        order = self._order_repo.create(dto.user_id, lines)
        invalidate_product_cache_on_commit()

        log.info("order.created", order_id=str(order.id), total_price=str(order.total_price))
        return self._order_repo.get_by_id(str(order.id)) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_orders(self, user_id: Any) -> models.QuerySet:
        """The user's orders, newest first."""
        return self._order_repo.list_for_user(user_id)

    def get_order(self, order_id: str, user_id: Any) -> Order:
        """Retrieve one of the user's orders.

        Raises:
            OrderNotFound: unknown ID or an order owned by someone else.
        """
        order = self._order_repo.get_for_user(order_id, user_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order
