"""Sequential chain executor with short-circuit semantics."""

from collections.abc import Iterable

from queen._internal.invoke import accepts_positional, invoke
from queen._internal.types import Handler
from queen.http.request import Request
from queen.http.response import Response
from queen.middleware.protocol import Continuation, Outcome


async def run_step(handler: Handler, request: Request, response: Response) -> Outcome:
    """Run one handler to completion and report its outcome.

    An explicit ``Outcome`` return value wins. Otherwise the handler
    continues only if it called its ``Continuation``.
    """
    if accepts_positional(handler, 3):
        signal = Continuation()
        result = await invoke(handler, request, response, signal)
    else:
        signal = None
        result = await invoke(handler, request, response)

    if isinstance(result, Outcome):
        return result
    if signal is not None and signal.called:
        return Outcome.CONTINUE
    return Outcome.STOP


async def run_chain(
    handlers: Iterable[Handler],
    request: Request,
    response: Response,
) -> bool:
    """Run *handlers* in order against one request/response pair.

    Handler ``i + 1`` starts only after handler ``i`` (including all of
    its awaited I/O) has finished. Exceptions propagate unchanged and
    abort the chain.

    Returns ``True`` if every handler asked to continue, ``False`` as
    soon as one stops.
    """
    for handler in handlers:
        if await run_step(handler, request, response) is not Outcome.CONTINUE:
            return False
    return True
