"""ASGI middleware binding a correlation id to each HTTP request."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from uuid import uuid4

from fastapi import Request, Response

from newsletter_service.infrastructure.logging import bind_request_id

REQUEST_ID_HEADER = "x-request-id"


async def request_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind inbound or generated request id for the request and echo it back."""

    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    with bind_request_id(request_id):
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
