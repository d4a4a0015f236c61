"""Product DRF serializers (output representation).

Input is validated by the DTOs in ``dtos.py``; these serializers only
shape responses.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True
    )
    imageUrl = serializers.CharField(source="image_url", read_only=True)
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "category",
            "imageUrl",
            "user_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductImageSerializer(serializers.Serializer):
    """Multipart body of the image upload endpoint (schema only)."""

    image = serializers.FileField()
