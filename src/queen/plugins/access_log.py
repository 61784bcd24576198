"""Request logging plugin."""

import logging

from queen.http.request import Request
from queen.http.response import Response
from queen.middleware.protocol import CONTINUE, Outcome


class AccessLog:
    """Log ``METHOD path`` for every request, then continue.

    Register it first to see requests that later plugins short-circuit::

        app.register(AccessLog(), App.json())
    """

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("queen.access")

    async def __call__(self, request: Request, response: Response) -> Outcome:
        self._logger.info("%s %s", request.method, request.raw_path)
        return CONTINUE
