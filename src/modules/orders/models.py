"""Order and OrderProduct models.

- ``Order.description`` summarises the line count ("Order with N item(s)").
- ``OrderProduct.price`` snapshots the product price at order time.
- A product appears at most once per order.
- Product and user FKs use PROTECT to preserve order history; products
  are only ever soft-deleted.
"""

from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"


def describe_order(item_count: int) -> str:
    return f"Order with {item_count} item(s)"


class Order(BaseModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    description = models.CharField(max_length=255, blank=True, default="")
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="orders_user_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="orders_total_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderProduct(BaseModel):
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="order_products",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_products",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = "order_products"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "product"],
                name="order_products_unique_product_per_order",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_products_quantity_positive",
            ),
        ]

    @property
    def subtotal(self):
        return self.price * self.quantity

    def __str__(self) -> str:
        return f"{self.quantity}x {self.product_id}"
