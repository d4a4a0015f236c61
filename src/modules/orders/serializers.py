"""Order DRF serializers (output representation)."""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderProduct
from modules.products.serializers import ProductSerializer


class OrderProductSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True
    )
    product = ProductSerializer(read_only=True)

    class Meta:
        model = OrderProduct
        fields = ["id", "product_id", "quantity", "price", "product"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    total_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, coerce_to_string=False, read_only=True
    )
    order_products = OrderProductSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "description",
            "total_price",
            "status",
            "created_at",
            "updated_at",
            "order_products",
        ]
        read_only_fields = fields


class OrderItemInputSerializer(serializers.Serializer):
    """One element of the ``POST /orders/`` array (schema only)."""

    productId = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
