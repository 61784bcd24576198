"""ASGI handler — runs one request through plugins, routing and handlers.

Pipeline per request::

    Request.from_asgi -> plugins -> router.resolve -> route handlers
                                      (no match) -> 404 envelope

Any exception, other than the client dropping the connection while the
body is read, is caught here, logged once, and turned into the 500
envelope.
"""

import logging
from collections.abc import Sequence

from queen._internal.asgi import Receive, Scope, Send
from queen._internal.types import Handler
from queen.errors import TransportError
from queen.http.request import Request
from queen.http.response import DEFAULT_CHUNK_SIZE, Response
from queen.middleware.chain import run_chain
from queen.routing.router import Router
from queen.server.errors import send_internal_error, send_not_found

logger = logging.getLogger("queen.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    plugins: Sequence[Handler],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    try:
        request = await Request.from_asgi(scope, receive)
    except TransportError as exc:
        logger.warning("%s %s aborted: %s", scope.get("method"), scope.get("path"), exc)
        return
    except Exception:
        logger.exception("500 %s %s", scope.get("method"), scope.get("path"))
        await send_internal_error(Response(send, chunk_size=chunk_size))
        return

    response = Response(send, chunk_size=chunk_size)

    try:
        await dispatch(request, response, router=router, plugins=plugins)
    except Exception:
        logger.exception("500 %s %s", request.method, request.raw_path)
        await send_internal_error(response)
        return

    # Every handler stepped aside without writing: close the cycle
    if not response.finished:
        await response.end()


async def dispatch(
    request: Request,
    response: Response,
    *,
    router: Router,
    plugins: Sequence[Handler],
) -> None:
    """Run plugins, resolve the route and run its handlers.

    Plugins run on every request, including ones that end up as 404s.
    """
    if not await run_chain(plugins, request, response):
        return

    match = router.resolve(request.method, request.path)
    if match is None:
        await send_not_found(request, response)
        return

    if match.params:
        request.bind_params(match.params)

    await run_chain(match.handlers, request, response)
