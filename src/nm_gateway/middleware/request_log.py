"""Request logging middleware.

One line per HTTP request with method, path, status, latency, request id and
the connected wallet when present:

    INFO [POST] /api/v1/actions/bid -> 200 (41ms) req_a1b2c3d4e5f6 wallet=0xab..

A caller-supplied X-Request-ID is reused, otherwise a short id is generated.
Either way it is stored on request.state for ApiResponse and echoed back in
the response header.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("nm.request")

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_ID = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")


def request_id_of(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _incoming_id(request: Request) -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if _VALID_ID.match(supplied):
        return supplied
    return f"req_{uuid.uuid4().hex[:12]}"


def _short(account: str) -> str:
    return f"{account[:6]}..{account[-4:]}" if len(account) > 12 else account


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _incoming_id(request)
        request.state.request_id = request_id
        wallet = request.headers.get("x-wallet-address", "").strip()

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "[%s] %s -> %d (%.0fms) %s%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
            f" wallet={_short(wallet)}" if wallet else "",
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
