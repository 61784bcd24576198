"""Middleware — the handler protocol and the sequential chain executor.

Plugins and route handlers share one shape::

    async def handler(request: Request, response: Response) -> Outcome | None

Return ``CONTINUE`` to hand over to the next handler; return anything
else (or nothing) to stop. Handlers that take a third argument also
receive a ``Continuation`` to call instead.
"""

from queen.middleware.chain import run_chain
from queen.middleware.protocol import CONTINUE, STOP, Continuation, Handler, Outcome

__all__ = [
    "CONTINUE",
    "STOP",
    "Continuation",
    "Handler",
    "Outcome",
    "run_chain",
]
