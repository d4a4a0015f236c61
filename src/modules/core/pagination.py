"""Lenient page-number pagination.

Unlike DRF's ``PageNumberPagination`` this never answers 404: malformed
or non-positive ``page`` / ``pageSize`` values fall back to the defaults
and a page past the end simply yields no items.

Response envelope::

    {
        "currentPage": 2,
        "pageSize": 10,         # items actually returned
        "totalPages": 5,        # 0 when nothing matches
        "totalProducts": 42,    # ``total_key``
        "products": [...]       # ``results_key``
    }
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from django.conf import settings
from rest_framework.pagination import BasePagination
from rest_framework.request import Request
from rest_framework.response import Response


def parse_positive_int(value: Optional[str]) -> Optional[int]:
    """Return ``value`` as an int if it is a positive integer, else ``None``."""
    if value is None:
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


class StandardResultsSetPagination(BasePagination):
    page_query_param = "page"
    page_size_query_params = ("pageSize", "limit")
    max_page_size = 100
    results_key = "results"
    total_key = "total"

    def __init__(self) -> None:
        self.page_size = settings.REST_FRAMEWORK.get("PAGE_SIZE") or 10
        self.page = 1
        self.total = 0

    # ------------------------------------------------------------------
    # Query parameters
    # ------------------------------------------------------------------

    def get_page_number(self, request: Request) -> int:
        return parse_positive_int(request.query_params.get(self.page_query_param)) or 1

    def get_page_size(self, request: Request) -> int:
        for param in self.page_size_query_params:
            raw = request.query_params.get(param)
            if raw is None or raw == "":
                continue
            size = parse_positive_int(raw)
            if size is not None:
                return min(size, self.max_page_size)
            break
        return self.page_size

    # ------------------------------------------------------------------
    # DRF contract
    # ------------------------------------------------------------------

    def paginate_queryset(self, queryset, request: Request, view=None) -> List[Any]:
        self.page = self.get_page_number(request)
        self.page_size = self.get_page_size(request)
        self.total = queryset.count()
        offset = (self.page - 1) * self.page_size
        if offset >= self.total:
            return []
        return list(queryset[offset : offset + self.page_size])

    def get_paginated_payload(self, data: List[Any]) -> Dict[str, Any]:
        """Envelope as a plain dict, so callers can cache it."""
        return {
            "currentPage": self.page,
            "pageSize": len(data),
            "totalPages": math.ceil(self.total / self.page_size) if self.total else 0,
            self.total_key: self.total,
            self.results_key: list(data),
        }

    def get_paginated_response(self, data: List[Any]) -> Response:
        return Response(self.get_paginated_payload(data))
