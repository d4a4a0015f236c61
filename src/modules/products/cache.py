"""Product listing cache.

Each listing page is cached under
``products:page:{page}:size:{size}:search:{search}`` for
``PRODUCT_CACHE_TTL`` seconds.  Any catalog or stock change drops every
listing entry: the keys written so far are tracked in a registry entry,
and on Redis the ``products:page:*`` pattern is deleted as well so keys
missed by a concurrent registry update cannot survive.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import transaction

logger = structlog.get_logger(__name__)

KEY_PREFIX = "products:page:"
REGISTRY_KEY = "products:listing-keys"


def build_listing_key(page: int, size: int, search: str = "") -> str:
    return f"{KEY_PREFIX}{page}:size:{size}:search:{search}"


def get_listing(key: str) -> Optional[Dict[str, Any]]:
    payload = cache.get(key)
    logger.debug("product.cache_hit" if payload is not None else "product.cache_miss", key=key)
    return payload


def set_listing(key: str, payload: Dict[str, Any]) -> None:
    ttl = settings.PRODUCT_CACHE_TTL
    cache.set(key, payload, ttl)
    keys = set(cache.get(REGISTRY_KEY) or ())
    keys.add(key)
    cache.set(REGISTRY_KEY, keys, ttl)


def invalidate_product_cache() -> None:
    """Delete every cached listing page right now."""
    keys = set(cache.get(REGISTRY_KEY) or ())
    cache.delete_many(list(keys) + [REGISTRY_KEY])
    if hasattr(cache, "delete_pattern"):
        cache.delete_pattern(f"{KEY_PREFIX}*")
    logger.info("product.cache_invalidated", keys=len(keys))


def invalidate_product_cache_on_commit() -> None:
    """Schedule invalidation once the surrounding transaction commits."""
    transaction.on_commit(invalidate_product_cache)
