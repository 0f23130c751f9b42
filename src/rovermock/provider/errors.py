"""Error handling for the mock request pipeline.

Maps HTTPError exceptions and unexpected handler failures to plain text
responses so the intercepted client always receives an HTTP answer.
"""

import logging

from rovermock.errors import HTTPError
from rovermock.http.request import Request
from rovermock.http.response import Response

logger = logging.getLogger("rovermock.provider")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a Response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    response = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected handler exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)
    return Response(body="Internal Server Error", status=500)
