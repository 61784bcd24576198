"""Queen application class.

Mutable during setup (plugin and route registration).
Frozen at runtime when the first ASGI call arrives.
"""

import threading
from collections.abc import Callable, Sequence
from os import PathLike
from typing import Any

from queen._internal.asgi import Receive, Scope, Send
from queen._internal.invoke import invoke
from queen._internal.types import Handler
from queen.config import AppConfig
from queen.errors import ConflictError, EmptyHandlerError
from queen.plugins.json import JSONBody
from queen.plugins.multipart import MultipartBody
from queen.routing.router import Router
from queen.server.handler import handle_request


class App:
    """The queen application.

    Setup happens in two ordered phases: plugins first, then routes. The
    first route registration closes the plugin list; the first request
    (or ASGI lifespan startup) seals everything.

    Usage::

        app = App()
        app.register(App.json(), App.multipart("uploads"))

        async def show_user(request, response):
            await response.json({"id": request.params["id"]})

        app.get("/users/:id", show_user)

    Serve it with any ASGI server, e.g. ``uvicorn module:app``.

    Thread safety:
        Setup is single-threaded (module import time). The freeze
        transition uses a Lock + double-check so exactly one thread seals
        the app even if several workers take their first request at once.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_plugin_list",
        "_plugins",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._plugin_list: list[Handler] = []
        self._router: Router = Router()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._plugins: tuple[Handler, ...] = ()

    # -- Built-in plugin factories --

    @staticmethod
    def json() -> JSONBody:
        """Plugin that parses ``application/json`` bodies."""
        return JSONBody()

    @staticmethod
    def multipart(destination: str | PathLike[str]) -> MultipartBody:
        """Plugin that parses ``multipart/form-data`` bodies.

        *destination* is created immediately if it does not exist.
        """
        return MultipartBody(destination)

    # -- Plugins --

    def register(self, *plugins: Handler) -> None:
        """Append *plugins* to the chain that runs on every request.

        Raises:
            EmptyHandlerError: If no plugin is given.
            ConflictError: If a route has already been registered, even on
                an app that is already serving.
            RuntimeError: If the app is already serving.
        """
        if len(self._router) > 0:
            msg = "Cannot register a plugin after a route has been registered."
            raise ConflictError(msg)
        self._check_not_frozen()
        if not plugins:
            msg = "At least one plugin is required."
            raise EmptyHandlerError(msg)
        self._plugin_list.extend(plugins)

    # -- Route registration --

    def get(self, path: str, *handlers: Handler) -> None:
        """Register a GET route."""
        self._add_route("GET", path, handlers)

    def post(self, path: str, *handlers: Handler) -> None:
        """Register a POST route."""
        self._add_route("POST", path, handlers)

    def put(self, path: str, *handlers: Handler) -> None:
        """Register a PUT route."""
        self._add_route("PUT", path, handlers)

    def patch(self, path: str, *handlers: Handler) -> None:
        """Register a PATCH route."""
        self._add_route("PATCH", path, handlers)

    def delete(self, path: str, *handlers: Handler) -> None:
        """Register a DELETE route."""
        self._add_route("DELETE", path, handlers)

    def route(
        self,
        path: str,
        *,
        methods: Sequence[str] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. Use ``:name`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self._add_route(method, path, (func,))
            return func

        return decorator

    def _add_route(self, method: str, path: str, handlers: Sequence[Handler]) -> None:
        self._check_not_frozen()
        self._router.add(method, path, handlers)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def router(self) -> Router:
        return self._router

    @property
    def plugins(self) -> tuple[Handler, ...]:
        """Registered plugins, in the order they run."""
        return self._plugins if self._frozen else tuple(self._plugin_list)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            plugins=self._plugins,
            chunk_size=self.config.file_chunk_size,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await _run_hooks(self._startup_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await _run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Seal the route table and plugin chain.

        MUST only be called while holding _freeze_lock.
        """
        self._router.compile()
        self._plugins = tuple(self._plugin_list)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register plugins and routes before serving."
            )
            raise RuntimeError(msg)


async def _run_hooks(hooks: Sequence[Callable[..., Any]]) -> None:
    for hook in hooks:
        await invoke(hook)
