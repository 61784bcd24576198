"""Queen — a small ASGI request-dispatch engine.

Plugins run on every request; routes are static or ``:param`` patterns;
handlers write through the response and say whether the chain goes on.

Basic usage::

    from queen import CONTINUE, App

    app = App()
    app.register(App.json())

    async def greet(request, response):
        await response.send(f"Hello user {request.params['id']}")

    app.get("/users/:id", greet)
"""

__version__ = "0.1.0"
__all__ = [
    "CONTINUE",
    "STOP",
    "App",
    "AppConfig",
    "ConfigurationError",
    "ConflictError",
    "Continuation",
    "EmptyHandlerError",
    "HTTPError",
    "NotFound",
    "Outcome",
    "PatternError",
    "QueenError",
    "Request",
    "Response",
    "TransportError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import queen`` fast while providing a clean top-level API.
    """
    if name == "App":
        from queen.app import App

        return App

    if name == "AppConfig":
        from queen.config import AppConfig

        return AppConfig

    if name == "Request":
        from queen.http.request import Request

        return Request

    if name == "Response":
        from queen.http.response import Response

        return Response

    if name in ("CONTINUE", "STOP", "Continuation", "Outcome"):
        from queen.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "ConflictError",
        "EmptyHandlerError",
        "HTTPError",
        "NotFound",
        "PatternError",
        "QueenError",
        "TransportError",
    ):
        from queen import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
