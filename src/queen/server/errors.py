"""Error envelopes written by the dispatcher.

Both envelopes are JSON objects with a single ``message`` key.
"""

import logging

from queen.http.request import Request
from queen.http.response import Response

logger = logging.getLogger("queen.server")

NOT_FOUND_BODY = {"message": "not found"}
INTERNAL_ERROR_BODY = {"message": "internal server error"}


async def send_not_found(request: Request, response: Response) -> None:
    """Write the 404 envelope."""
    logger.debug("404 %s %s", request.method, request.raw_path)
    response.status = 404
    await response.json(NOT_FOUND_BODY)


async def send_internal_error(response: Response) -> None:
    """Write the 500 envelope, or close the response if it already started.

    Headers queued by the failed handler are dropped. Bytes already sent
    are not rolled back: a response that failed mid-stream is closed as it
    stands.
    """
    if response.finished:
        return
    if response.started:
        await response.end()
        return
    response.clear_headers()
    response.status = 500
    await response.json(INTERNAL_ERROR_BODY)
