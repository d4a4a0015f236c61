"""Django ORM implementation of the Order repository.

Reads eager-load lines and their products (``prefetch_related``) so
serializing an order never triggers per-line queries.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.orders.models import Order, OrderProduct, describe_order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def _with_lines(self) -> models.QuerySet:
        return Order.objects.prefetch_related("order_products__product")

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, user_id: Any, lines: List[Dict[str, Any]]) -> Order:
        total = sum(
            (line["price"] * line["quantity"] for line in lines), Decimal("0.00")
        )
        order = Order.objects.create(
            user_id=user_id,
            description=describe_order(len(lines)),
            total_price=total,
        )
        OrderProduct.objects.bulk_create(
            [
                OrderProduct(
                    order=order,
                    product_id=line["product_id"],
                    quantity=line["quantity"],
                    price=line["price"],
                )
                for line in lines
            ]
        )
        logger.info("order.persisted", order_id=str(order.id), line_count=len(lines))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """``None`` for non-existent or malformed IDs."""
        try:
            return self._with_lines().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_user(self, id: str, user_id: Any) -> Optional[Order]:
        try:
            return self._with_lines().filter(id=id, user_id=user_id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = self._with_lines()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_for_user(self, user_id: Any) -> models.QuerySet:
        return self.list({"user_id": user_id}).order_by("-created_at", "-id")

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.deleted", order_id=str(id))
        return True
