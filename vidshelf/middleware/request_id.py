"""Request ID middleware.

Binds a request ID to the logging context for the duration of each request
and echoes it back in the response headers.
"""

import re

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from vidshelf.core.logging import clear_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# Accept client-supplied IDs only if they are short and log-safe
_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns every request an ID, reusing a well-formed client-supplied one."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming and not _CLIENT_ID_PATTERN.match(incoming):
            incoming = None

        request_id = set_request_id(incoming)
        try:
            response = await call_next(request)
        finally:
            clear_request_id()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
