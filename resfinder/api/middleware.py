from __future__ import annotations

import logging
import time
from typing import Callable, Optional
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("resfinder.api")

REQUEST_ID_HEADER = "X-Request-ID"
RESULT_COUNT_HEADER = "X-Result-Count"

# Query parameters that narrow a resource listing.
FILTER_PARAMS = frozenset(
    {
        "organization",
        "domain",
        "resource_type",
        "data_sensitivity",
        "access_model",
        "requires_api",
        "requires_web",
        "free_only",
        "open_access_only",
        "max_access",
        "max_sensitivity",
    }
)


def _request_id(request: Request, max_len: int) -> str:
    rid = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if not rid or len(rid) > max_len or not rid.isprintable():
        return uuid4().hex
    return rid


class CatalogRequestMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and write one access record for it.

    The record carries the search text length and the number of active
    filter parameters, never the values themselves. Endpoints that return
    resource lists report their size in X-Result-Count; it is copied into
    the record as result_count.
    """

    def __init__(self, app, *, max_request_id_len: int = 128):
        super().__init__(app)
        self._max_len = max_request_id_len

    async def dispatch(self, request: Request, call_next: Callable):
        rid = _request_id(request, self._max_len)
        request.state.request_id = rid
        params = request.query_params
        start = time.monotonic()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            count = response.headers.get(RESULT_COUNT_HEADER) if response is not None else None
            log.info(
                "api_request",
                extra={
                    "request_id": rid,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": getattr(response, "status_code", None),
                    "duration_ms": int((time.monotonic() - start) * 1000),
                    "query_len": len(params.get("q", "")),
                    "active_filters": sum(1 for k in params.keys() if k in FILTER_PARAMS),
                    "result_count": int(count) if count is not None else None,
                },
            )
