"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.  Reads are
public and cached; writes require the ``admin`` role.  Domain exceptions
are caught and translated into HTTP status codes.
"""

from __future__ import annotations

from collections.abc import Mapping

from drf_spectacular.utils import OpenApiParameter, extend_schema
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import IsAdminRole
from modules.core.errors import pydantic_detail
from modules.core.pagination import StandardResultsSetPagination
from modules.core.throttling import ApiRateThrottle, GlobalRateThrottle
from modules.products.cache import build_listing_key, get_listing, set_listing
from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import (
    ImageStorageUnavailable,
    ImageUploadFailed,
    InvalidImage,
    ProductNotFound,
)
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductImageSerializer, ProductSerializer
from modules.products.services import ProductService

PRODUCT_FIELDS = ("name", "description", "price", "stock", "category")

IMAGE_ERRORS = {
    InvalidImage: status.HTTP_400_BAD_REQUEST,
    ImageUploadFailed: status.HTTP_502_BAD_GATEWAY,
    ImageStorageUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ProductPagination(StandardResultsSetPagination):
    results_key = "products"
    total_key = "totalProducts"


def _detail(message: str, code: int) -> Response:
    return Response({"detail": message}, status=code)


def _not_found() -> Response:
    return _detail("Product not found.", status.HTTP_404_NOT_FOUND)


class ProductViewSet(GenericViewSet):
    """Catalog endpoints.

    Does **not** extend ``ModelViewSet``: all ORM access goes through the
    service/repository layer.
    """

    serializer_class = ProductSerializer
    pagination_class = ProductPagination
    throttle_classes = [GlobalRateThrottle, ApiRateThrottle]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        return self._service.list_products()

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAdminRole()]

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter("page", int),
            OpenApiParameter("pageSize", int),
            OpenApiParameter("limit", int),
            OpenApiParameter("search", str),
        ]
    )
    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        search = request.query_params.get("search", "").strip()
        paginator = self.paginator
        key = build_listing_key(
            paginator.get_page_number(request),
            paginator.get_page_size(request),
            search,
        )

        payload = get_listing(key)
        if payload is None:
            page = paginator.paginate_queryset(
                self._service.list_products(search), request, view=self
            )
            payload = paginator.get_paginated_payload(
                ProductSerializer(page, many=True).data
            )
            set_listing(key, payload)
        return Response(payload)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/ (JSON or multipart with optional ``image``)"""
        data = request.data
        if not isinstance(data, Mapping):
            return _detail("Invalid request body", status.HTTP_400_BAD_REQUEST)

        missing = [f for f in PRODUCT_FIELDS if data.get(f) in (None, "")]
        if missing:
            return _detail(
                f"Missing required fields: {', '.join(missing)}",
                status.HTTP_400_BAD_REQUEST,
            )

        try:
            dto = CreateProductDTO(**{f: data.get(f) for f in PRODUCT_FIELDS})
        except PydanticValidationError as exc:
            return _detail(pydantic_detail(exc), status.HTTP_400_BAD_REQUEST)

        try:
            product = self._service.create_product(
                dto, owner=request.user, image=request.FILES.get("image")
            )
        except tuple(IMAGE_ERRORS) as exc:
            return _detail(str(exc), IMAGE_ERRORS[type(exc)])

        return Response(
            {
                "message": "Product created successfully",
                "product": ProductSerializer(product).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/ (every field optional)"""
        data = request.data
        if not isinstance(data, Mapping):
            return _detail("Invalid request body", status.HTTP_400_BAD_REQUEST)

        try:
            dto = UpdateProductDTO(**{f: data.get(f) for f in PRODUCT_FIELDS})
        except PydanticValidationError as exc:
            return _detail(pydantic_detail(exc), status.HTTP_400_BAD_REQUEST)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found()

        return Response(
            {
                "message": "Product updated successfully",
                "product": ProductSerializer(product).data,
            }
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/ (soft delete)"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response({"message": "Product deleted successfully"})

    @extend_schema(request=ProductImageSerializer)
    @action(
        detail=True,
        methods=["post"],
        url_path="image",
        parser_classes=[MultiPartParser, FormParser],
    )
    def upload_image(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/products/{pk}/image/"""
        try:
            product = self._service.upload_image(pk, request.FILES.get("image"))
        except ProductNotFound:
            return _not_found()
        except tuple(IMAGE_ERRORS) as exc:
            return _detail(str(exc), IMAGE_ERRORS[type(exc)])

        return Response(
            {"message": "Image uploaded successfully", "imageUrl": product.image_url}
        )
