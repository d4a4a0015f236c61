"""Stock concurrency integration test.

Proves that ``SELECT FOR UPDATE`` in ``OrderService.create_order``
serializes concurrent stock reservations.

Scenario:
- Product "Gamer PC" with **stock = 5**.
- 10 threads attempt to buy 1 unit each simultaneously.
- Exactly 5 succeed, 5 raise ``InsufficientStock``.
- Final stock is 0 (never negative).

Uses ``TransactionTestCase`` so each thread sees committed data.  Needs
a backend with row locks; skipped on SQLite.  Run with
``DATABASE_URL=postgres://...`` to exercise it.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from modules.accounts.models import User, UserRole
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

logger = logging.getLogger(__name__)

INITIAL_STOCK = 5
NUM_WORKERS = 10


@skipUnlessDBFeature("has_select_for_update")
class TestStockConcurrency(TransactionTestCase):
    """Prove atomic stock reservation under concurrent load."""

    def setUp(self):
        admin = User.objects.create_user(
            username="owner",
            email="owner@example.com",
            password="Hello@1234",
            role=UserRole.ADMIN,
        )
        self.buyer = User.objects.create_user(
            username="buyer", email="buyer@example.com", password="Hello@1234"
        )
        self.product = Product.objects.create(
            name="Gamer PC",
            description="High-end desktop",
            price=Decimal("2999.99"),
            stock=INITIAL_STOCK,
            category="Computers",
            user=admin,
        )

    def _create_order_in_thread(self, thread_id: int) -> str:
        """Attempt to create an order. Returns 'success' or 'insufficient'."""
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        dto = CreateOrderDTO(
            user_id=self.buyer.id,
            items=[CreateOrderItemDTO(product_id=self.product.id, quantity=1)],
        )
        try:
            service.create_order(dto)
            logger.info("Thread %d: order created", thread_id)
            return "success"
        except InsufficientStock:
            logger.info("Thread %d: insufficient stock", thread_id)
            return "insufficient"
        finally:
            connection.close()

    def _run_workers(self) -> list[str]:
        with ThreadPoolExecutor(max_workers=NUM_WORKERS) as pool:
            futures = [
                pool.submit(self._create_order_in_thread, i) for i in range(NUM_WORKERS)
            ]
            return [future.result() for future in as_completed(futures)]

    def test_concurrent_orders_exhaust_stock(self):
        """10 threads buy 1 unit from stock=5: exactly 5 succeed."""
        results = self._run_workers()

        self.assertEqual(results.count("success"), INITIAL_STOCK)
        self.assertEqual(results.count("insufficient"), NUM_WORKERS - INITIAL_STOCK)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 0)
        self.assertEqual(Order.objects.count(), INITIAL_STOCK)

    def test_stock_is_conserved(self):
        """initial = sold + remaining, and remaining never drops below zero."""
        results = self._run_workers()

        self.product.refresh_from_db()
        self.assertGreaterEqual(self.product.stock, 0)
        self.assertEqual(INITIAL_STOCK, results.count("success") + self.product.stock)
