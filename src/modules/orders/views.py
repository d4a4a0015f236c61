"""Order API views.

Exposes the ``OrderService`` via HTTP.  Every route requires a valid JWT
and only ever shows the caller's own orders.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.errors import pydantic_detail
from modules.core.throttling import ApiRateThrottle, GlobalRateThrottle
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock, OrderNotFound, ProductNotFound
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderItemInputSerializer, OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository

INVALID_BODY = "Invalid request body"


class OrderViewSet(GenericViewSet):
    """Does **not** extend ``ModelViewSet``: reads and writes go through
    the service/repository layer."""

    serializer_class = OrderSerializer
    throttle_classes = [GlobalRateThrottle, ApiRateThrottle]
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_queryset(self):
        return self._service.list_orders(self.request.user.id)

    @extend_schema(
        request=OrderItemInputSerializer(many=True),
        responses={201: OrderSerializer},
    )
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/ with a JSON array of ``{productId, quantity}``"""
        body = request.data
        if not isinstance(body, list):
            return Response({"detail": INVALID_BODY}, status=status.HTTP_400_BAD_REQUEST)

        try:
            items = [CreateOrderItemDTO.model_validate(line) for line in body]
        except PydanticValidationError:
            return Response({"detail": INVALID_BODY}, status=status.HTTP_400_BAD_REQUEST)

        try:
            dto = CreateOrderDTO(user_id=request.user.id, items=items)
        except PydanticValidationError as exc:
            return Response(
                {"detail": pydantic_detail(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = self._service.create_order(dto)
        except ProductNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientStock as exc:
            return Response(
                {
                    "detail": str(exc),
                    "product": exc.product_name,
                    "available": exc.available,
                    "requested": exc.requested,
                },
                status=status.HTTP_409_CONFLICT,
            )

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/ (newest first)"""
        orders = self._service.list_orders(request.user.id)
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk, request.user.id)
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(OrderSerializer(order).data)
