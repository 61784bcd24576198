"""Handler protocol, Outcome and the Continuation signal.

No base class required. A handler is any callable matching one of::

    async def h(request: Request, response: Response) -> Outcome | None: ...
    async def h(request: Request, response: Response, next: Continuation) -> None: ...

Sync ``def`` handlers work too.
"""

from enum import Enum
from typing import Any, Protocol

from queen.http.request import Request
from queen.http.response import Response


class Outcome(Enum):
    """What a handler wants the chain to do next."""

    CONTINUE = "continue"
    STOP = "stop"


CONTINUE = Outcome.CONTINUE
STOP = Outcome.STOP


class Continuation:
    """Single-use "proceed" signal handed to three-argument handlers.

    Only the first call counts; later calls are ignored. A handler that
    never calls it stops the chain.
    """

    __slots__ = ("_called",)

    def __init__(self) -> None:
        self._called = False

    def __call__(self) -> None:
        if not self._called:
            self._called = True

    @property
    def called(self) -> bool:
        return self._called

    def __repr__(self) -> str:
        return f"Continuation(called={self._called})"


class Handler(Protocol):
    """Protocol for plugins and route handlers.

    Function handler::

        async def auth(request: Request, response: Response) -> Outcome:
            if "authorization" not in request.headers:
                response.status = 401
                await response.json({"message": "unauthorized"})
                return STOP
            return CONTINUE

    Callable object::

        class Stamp:
            async def __call__(self, request, response, next):
                response.set_header("X-Stamp", "1")
                next()
    """

    def __call__(self, request: Request, response: Response, /, *args: Any) -> Any: ...
