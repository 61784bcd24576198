"""Invoke helpers — call sync or async handlers uniformly.

Handlers and plugins can be ``def`` or ``async def``. Anything that calls
user code goes through :func:`invoke` so the sync/async check lives in
exactly one place.
"""

import inspect
from collections.abc import Callable
from typing import Any


async def invoke(handler: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def accepts_positional(handler: Callable[..., Any], count: int) -> bool:
    """True if *handler* can be called with *count* positional arguments."""
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return False

    positional = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= count
