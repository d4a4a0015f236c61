"""Product service layer (Use Cases).

Orchestrates catalog changes, delegating persistence to the injected
``IProductRepository`` and image hosting to a storage factory.  Every
successful write drops the cached listing pages once the transaction
commits; stale images are removed by a background task.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import structlog
from django.db import models, transaction

from modules.products.cache import invalidate_product_cache_on_commit
from modules.products.exceptions import InvalidImage, ProductNotFound
from modules.products.models import Product
from modules.products.storage import CloudinaryImageStorage, get_image_storage
from modules.products.tasks import schedule_image_deletion

if TYPE_CHECKING:
    from modules.accounts.models import User
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases."""

    def __init__(
        self,
        repository: IProductRepository,
        storage_factory: Callable[[], CloudinaryImageStorage] = get_image_storage,
    ) -> None:
        self._repo = repository
        self._storage_factory = storage_factory

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO, owner: User, image=None) -> Product:
        """Create a product, uploading ``image`` first when one is given.

        Raises:
            ImageStorageUnavailable, InvalidImage, ImageUploadFailed:
                the image could not be stored; nothing is saved.
        """
        image_url = self._storage_factory().upload(image) if image is not None else ""

        try:
            product = self._save_new(dto, owner, image_url)
        except Exception:
            if image_url:
                schedule_image_deletion(image_url)
            raise

        logger.info(
            "product.created",
            product_id=str(product.id),
            user_id=str(owner.id),
            has_image=bool(image_url),
        )
        return product

    @transaction.atomic
    def _save_new(self, dto: CreateProductDTO, owner: User, image_url: str) -> Product:
        product = Product(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            stock=dto.stock,
            category=dto.category,
            image_url=image_url,
            user=owner,
        )
        product = self._repo.save(product)
        invalidate_product_cache_on_commit()
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields to an existing product.

        The row is locked and only the supplied columns are written, so a
        concurrent order's stock deduction is never overwritten.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._get_locked(id)
        changes = dto.changes()
        for field, value in changes.items():
            setattr(product, field, value)

        if changes:
            product = self._repo.save(product, update_fields=list(changes))
            invalidate_product_cache_on_commit()
        logger.info("product.updated", product_id=str(id), fields=sorted(changes))
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product and queue removal of its image.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self.get_product(id)
        self._repo.delete(id)
        if product.image_url:
            schedule_image_deletion(product.image_url)
        invalidate_product_cache_on_commit()
        logger.info("product.deleted", product_id=str(id))

    def upload_image(self, id: str, image) -> Product:
        """Replace the product image; the previous one is deleted best-effort.

        The upload runs outside any transaction; the row is locked again
        afterwards and only ``image_url`` is written.

        Raises:
            ProductNotFound: if the product does not exist, or was deleted
                while the image was uploading.
            ImageStorageUnavailable, InvalidImage, ImageUploadFailed:
                the new image could not be stored.
        """
        self.get_product(id)
        storage = self._storage_factory()
        if image is None:
            raise InvalidImage("No image file provided")
        new_url = storage.upload(image)

        with transaction.atomic():
            try:
                product = self._get_locked(id)
            except ProductNotFound:
                schedule_image_deletion(new_url)
                raise
            previous_url = product.image_url
            product.image_url = new_url
            product = self._repo.save(product, update_fields=["image_url"])
            if previous_url:
                schedule_image_deletion(previous_url)
            invalidate_product_cache_on_commit()

        logger.info("product.image_replaced", product_id=str(id))
        return product

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, search: str = "") -> models.QuerySet:
        """Alive products, newest first, optionally filtered by name."""
        return self._repo.search(search)

    def get_product(self, id: str) -> Product:
        """Retrieve a single alive product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def _get_locked(self, id: str) -> Product:
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
