"""Product repository interface.

Extends ``IRepository[Product]`` with catalog search and the row-locking
look-up used by order placement.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate.

    Soft-deleted products are invisible through every method.
    """

    @abstractmethod
    def search(self, term: str = "") -> "models.QuerySet[Product]":
        """Alive products whose name contains ``term`` (case-insensitive)."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must be called inside a transaction.  Returns ``None`` if the
        product does not exist or has been soft-deleted.
        """

    @abstractmethod
    def save(
        self, entity: "Product", update_fields: Optional[Iterable[str]] = None
    ) -> "Product":
        """Persist a product.

        With ``update_fields`` only those columns are written; callers
        editing a locked row pass them so ``stock`` is left to orders.
        """
