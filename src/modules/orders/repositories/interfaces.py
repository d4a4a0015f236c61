"""Order repository interface.

Extends ``IRepository[Order]`` with aggregate creation (order plus its
lines) and per-user look-ups.  The Service Layer depends exclusively on
this contract.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, user_id: Any, lines: List[Dict[str, Any]]) -> Order:
        """Create an order with its lines.

        Each line is a dict with ``product_id``, ``quantity`` and ``price``;
        ``total_price`` and ``description`` are derived from them.
        """

    @abstractmethod
    def list_for_user(self, user_id: Any) -> "models.QuerySet[Order]":
        """The user's orders, newest first, with lines and products loaded."""

    @abstractmethod
    def get_for_user(self, id: str, user_id: Any) -> Optional[Order]:
        """One of the user's orders, or ``None``."""
