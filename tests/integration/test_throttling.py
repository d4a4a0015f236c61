"""Per-IP rate limit tiers.

Rates are lowered per test by patching ``THROTTLE_RATES`` on the shared
base class; counters are reset by the autouse cache fixture.
"""

from __future__ import annotations

import pytest

from modules.core.throttling import IPRateThrottle

pytestmark = pytest.mark.integration

LOGIN_URL = "/api/v1/auth/login/"
PRODUCTS_URL = "/api/v1/products/"


@pytest.fixture()
def rates(monkeypatch):
    def _set(**overrides):
        values = {"global": "1000/hour", "auth": "5/minute", "api": "100/minute"}
        values.update(overrides)
        monkeypatch.setattr(IPRateThrottle, "THROTTLE_RATES", values)

    _set()
    return _set


def _login(client, ip="10.0.0.1"):
    return client.post(
        LOGIN_URL,
        {"email": "nobody@example.com", "password": "Hello@1234"},
        format="json",
        REMOTE_ADDR=ip,
    )


def test_auth_tier_allows_five_attempts_per_minute(api_client, rates):
    for _ in range(5):
        assert _login(api_client).status_code == 401

    response = _login(api_client)

    assert response.status_code == 429
    assert int(response["Retry-After"]) > 0


def test_auth_tier_is_per_ip(api_client, rates):
    for _ in range(5):
        _login(api_client, ip="10.0.0.1")
    assert _login(api_client, ip="10.0.0.1").status_code == 429
    assert _login(api_client, ip="10.0.0.2").status_code == 401


def test_auth_tier_does_not_limit_catalog(api_client, rates):
    for _ in range(6):
        _login(api_client)
    assert api_client.get(PRODUCTS_URL, REMOTE_ADDR="10.0.0.1").status_code == 200


def test_api_tier(api_client, rates):
    rates(api="3/minute")
    for _ in range(3):
        assert api_client.get(PRODUCTS_URL).status_code == 200
    assert api_client.get(PRODUCTS_URL).status_code == 429


def test_global_tier_covers_every_route(api_client, rates):
    rates(**{"global": "2/minute"})
    assert api_client.get(PRODUCTS_URL).status_code == 200
    assert _login(api_client, ip="127.0.0.1").status_code == 401
    assert api_client.get(PRODUCTS_URL).status_code == 429


def test_authenticated_users_share_the_ip_quota(api_client, shopper_client, rates):
    rates(api="2/minute")
    assert api_client.get(PRODUCTS_URL).status_code == 200
    assert shopper_client.get("/api/v1/orders/").status_code == 200
    assert shopper_client.get("/api/v1/orders/").status_code == 429
