"""Structured HTTP request.

Holds the ASGI scope rather than extending it, and adds what the
pipeline needs: a normalized path, the decomposed query, route params and
the accumulated body. Plugins fill in ``body``; the router fills in
``params``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from queen._internal.asgi import Receive, Scope
from queen.errors import TransportError
from queen.http.headers import Headers
from queen.http.query import QueryValue, parse_query


def normalize_path(path: str) -> str:
    """Lower-case *path* and make sure it begins and ends with ``/``.

    Examples::

        "users"         -> "/users/"
        "/Users/42"     -> "/users/42/"
        "/"             -> "/"
    """
    path = path.lower()
    if not path.startswith("/"):
        path = "/" + path
    if not path.endswith("/"):
        path = path + "/"
    return path


@dataclass(slots=True)
class Request:
    """An HTTP request as seen by plugins and route handlers.

    ``path`` is normalized (lower-case, leading and trailing slash);
    ``raw_path`` keeps what the client sent. ``buffer`` holds the full
    body once the transport stream completes; ``body`` stays ``None``
    until a body-parser plugin sets it.
    """

    scope: Scope
    method: str
    path: str
    raw_path: str
    headers: Headers
    query: dict[str, QueryValue]
    buffer: bytes = b""
    body: Any = None
    _params: dict[str, str] | None = field(default=None, repr=False)

    # -- Forwarding accessors --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def client(self) -> tuple[str, int] | None:
        client = self.scope.get("client")
        return tuple(client) if client else None

    @property
    def server(self) -> tuple[str, int] | None:
        server = self.scope.get("server")
        return tuple(server) if server else None

    @property
    def http_version(self) -> str:
        return self.scope.get("http_version", "1.1")

    # -- Route params --

    @property
    def params(self) -> dict[str, str]:
        """Captured path parameters; empty unless a dynamic route matched."""
        if self._params is None:
            return {}
        return self._params

    def bind_params(self, params: dict[str, str]) -> None:
        """Attach the captures of a dynamic route match.

        Raises ``RuntimeError`` if params were already bound.
        """
        if self._params is not None:
            msg = "Route params are already bound for this request."
            raise RuntimeError(msg)
        self._params = dict(params)

    # -- Factory --

    @classmethod
    async def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Build a Request, accumulating the body from *receive*.

        Suspends until the client has sent the whole body. Raises
        ``TransportError`` if the client disconnects first.
        """
        chunks: list[bytes] = []
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                msg = "Client disconnected before the request body completed."
                raise TransportError(msg)
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break

        raw_path = scope.get("path") or "/"
        return cls(
            scope=scope,
            method=scope["method"].upper(),
            path=normalize_path(raw_path),
            raw_path=raw_path,
            headers=Headers(scope.get("headers", ())),
            query=parse_query(scope.get("query_string", b"")),
            buffer=b"".join(chunks),
        )
