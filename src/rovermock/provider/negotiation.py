"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable:

- ``Response`` → returned as is
- ``None``     → ``204 No Content``
- ``str``      → ``text/plain``
- anything else → JSON
"""

from typing import Any

from rovermock.http.response import Response, empty_response, json_response


def negotiate(value: Any) -> Response:
    """Convert a handler's return value into a Response."""
    if isinstance(value, Response):
        return value
    if value is None:
        return empty_response(204)
    if isinstance(value, str):
        return Response(body=value)
    return json_response(value)
