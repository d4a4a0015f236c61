import re
import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

REQUEST_ID_HEADER = "X-Request-ID"
SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")

logger = structlog.get_logger(__name__)


def resolve_request_id(request: HttpRequest) -> str:
    """Caller-supplied ``X-Request-ID`` when it is safe to log, else a UUID4."""
    supplied = request.META.get("HTTP_X_REQUEST_ID", "")
    if SAFE_REQUEST_ID.match(supplied):
        return supplied
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Binds a request ID into structlog's contextvars for the whole request.

    Every log line emitted while serving the request carries
    ``correlation_id``; the same value is echoed in the response header.
    One access line is written per request: ``info`` below 400, ``warning``
    for client errors and ``error`` for server errors.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = resolve_request_id(request)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=request_id)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = round((time.monotonic() - started) * 1000, 2)

        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        else:
            log = logger.info
        log(
            "request.handled",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=elapsed_ms,
        )

        response[REQUEST_ID_HEADER] = request_id
        return response
