"""Per-IP rate limit tiers.

Each tier is a DRF ``SimpleRateThrottle`` keyed by the client address
(``X-Forwarded-For`` is honoured according to ``NUM_PROXIES``), so an
authenticated user behind the same IP shares the quota of anonymous
callers.  Counters live in the default Django cache; because the cache key
contains the scope, the tiers are counted independently of each other.

Rates come from ``REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]``:

- ``global``: every API route (default 1000/hour).
- ``auth``: registration and login (default 5/minute).
- ``api``: product and order routes (default 100/minute).
"""

from __future__ import annotations

import structlog
from rest_framework.throttling import SimpleRateThrottle

logger = structlog.get_logger(__name__)


class IPRateThrottle(SimpleRateThrottle):
    """Throttle every request by client IP, regardless of authentication."""

    def get_cache_key(self, request, view) -> str:
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }

    def throttle_failure(self) -> bool:
        logger.warning(
            "ratelimit.exceeded",
            scope=self.scope,
            key=self.key,
            limit=self.num_requests,
            window_seconds=self.duration,
        )
        return False


class GlobalRateThrottle(IPRateThrottle):
    scope = "global"


class AuthRateThrottle(IPRateThrottle):
    """Strict quota for credential endpoints (brute-force protection)."""

    scope = "auth"


class ApiRateThrottle(IPRateThrottle):
    scope = "api"
