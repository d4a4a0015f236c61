from __future__ import annotations

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.models import UserRole
from modules.accounts.services import issue_tokens
from modules.products.models import Product

PASSWORD = "Hello@1234"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters and cached listings must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def make_user():
    def _make(username="shopper", email=None, role=UserRole.USER):
        return get_user_model().objects.create_user(
            username=username,
            email=email or f"{username}@example.com",
            password=PASSWORD,
            role=role,
        )

    return _make


@pytest.fixture()
def shopper(make_user):
    return make_user("shopper")


@pytest.fixture()
def admin(make_user):
    return make_user("boss", role=UserRole.ADMIN)


def bearer_client(user) -> APIClient:
    """APIClient sending a real access token for ``user``."""
    client = APIClient()
    token = issue_tokens(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture()
def client_for():
    """Factory building an authenticated APIClient for any user."""
    return bearer_client


@pytest.fixture()
def shopper_client(shopper):
    return bearer_client(shopper)


@pytest.fixture()
def admin_api_client(admin):
    return bearer_client(admin)


@pytest.fixture()
def make_product(admin):
    def _make(name="Wireless Mouse", price="49.99", stock=10, **extra):
        extra.setdefault("description", f"{name} description")
        extra.setdefault("category", "Accessories")
        return Product.objects.create(
            name=name,
            price=Decimal(price),
            stock=stock,
            user=admin,
            **extra,
        )

    return _make
