"""Immutable HTTP request.

Only what the rover handlers read: method, path and the body. Handlers
never validate it; the simulated rover accepts whatever the client sends.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field
from typing import Any

from rovermock._internal.asgi import Receive, Scope


@dataclass(frozen=True, slots=True)
class Request:
    """An intercepted HTTP request.

    The body is read asynchronously via ``.body()`` or ``.json()``.
    """

    method: str
    path: str

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: body cache (dict contents are mutable, the field is not)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls return the
        cached bytes.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def json(self) -> Any:
        """Parse the body as JSON.

        Raises ``ValueError`` on malformed input and ``RecursionError`` on
        nesting deeper than the interpreter's recursion limit.
        """
        return json_module.loads(await self.body())

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        return cls(method=scope["method"], path=scope["path"], _receive=receive)
