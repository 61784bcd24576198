"""JSON body parser plugin."""

import json as json_module
import logging

from queen.http.request import Request
from queen.http.response import Response
from queen.middleware.protocol import CONTINUE, Outcome

logger = logging.getLogger("queen.plugins")

JSON_MEDIA_TYPE = "application/json"


class JSONBody:
    """Parse ``application/json`` request bodies into ``request.body``.

    Only acts when the Content-Type header is exactly
    ``application/json`` and the body is non-empty. A body that is not
    valid UTF-8 JSON leaves ``request.body`` unset; the failure is not
    reported to the client. Never stops the chain.
    """

    __slots__ = ()

    async def __call__(self, request: Request, response: Response) -> Outcome:
        if request.content_type != JSON_MEDIA_TYPE or not request.buffer:
            return CONTINUE

        try:
            request.body = json_module.loads(request.buffer.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            logger.debug("Ignoring malformed JSON body on %s %s: %s", request.method, request.raw_path, exc)

        return CONTINUE

    def __repr__(self) -> str:
        return "JSONBody()"
