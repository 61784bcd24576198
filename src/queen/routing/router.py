"""Route table with static fast path and specificity-ranked patterns.

Static routes live in a dict keyed by ``(method, path)`` and are looked up
first. Dynamic routes are scanned only when no static route matches; the
one with the most fixed segments wins, and among equals the one registered
first.
"""

import re
from collections.abc import Sequence
from dataclasses import replace

from queen._internal.types import HTTP_METHODS, Handler
from queen.errors import ConfigurationError, ConflictError, EmptyHandlerError, NotFound
from queen.http.request import normalize_path
from queen.routing.route import DynamicRoute, RouteMatch, StaticRoute, compile_path


class Router:
    """Route table for one app.

    Usage::

        router = Router()
        router.add("GET", "/users/profile", [profile])
        router.add("GET", "/users/:id", [show_user])
        router.compile()
        match = router.resolve("GET", "/Users/42")
        # match.params == {"id": "42"}
    """

    __slots__ = ("_compiled", "_dynamic", "_order", "_static")

    def __init__(self) -> None:
        self._static: dict[tuple[str, str], StaticRoute] = {}
        self._dynamic: dict[str, list[DynamicRoute]] = {}
        self._order = 0
        self._compiled = False

    def add(self, method: str, raw_path: str, handlers: Sequence[Handler]) -> None:
        """Register *handlers* for *method* and *raw_path*.

        Adding to an existing static route appends its handlers.

        Raises:
            EmptyHandlerError: If *handlers* is empty.
            PatternError: If a path segment is outside the grammar.
            ConflictError: If a dynamic route for *method* already
                compiles to the same pattern.
            ConfigurationError: If *method* is not supported.
            RuntimeError: If the router has been compiled.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        if not handlers:
            msg = f"At least one handler is required for {method} {raw_path!r}."
            raise EmptyHandlerError(msg)

        method = method.upper()
        if method not in HTTP_METHODS:
            allowed = ", ".join(sorted(HTTP_METHODS))
            msg = f"Unsupported method {method!r}. Supported methods: {allowed}."
            raise ConfigurationError(msg)

        compiled = compile_path(raw_path)
        new_handlers = tuple(handlers)

        if not compiled.is_dynamic:
            key = (method, compiled.path)
            existing = self._static.get(key)
            if existing is None:
                self._static[key] = StaticRoute(method, compiled.path, new_handlers)
            else:
                self._static[key] = replace(existing, handlers=existing.handlers + new_handlers)
            self._order += 1
            return

        assert compiled.pattern is not None
        routes = self._dynamic.setdefault(method, [])
        for route in routes:
            if route.pattern == compiled.pattern:
                msg = (
                    f"Route {method} {raw_path!r} conflicts with {method} {route.path!r}: "
                    f"both compile to {compiled.pattern!r}."
                )
                raise ConflictError(msg)

        routes.append(
            DynamicRoute(
                method=method,
                path=compiled.path,
                regex=re.compile(compiled.pattern),
                specificity=compiled.specificity,
                segment_names=compiled.segment_names,
                handlers=new_handlers,
                order=self._order,
            )
        )
        self._order += 1

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    @property
    def compiled(self) -> bool:
        return self._compiled

    def __len__(self) -> int:
        return len(self._static) + sum(len(routes) for routes in self._dynamic.values())

    @property
    def routes(self) -> list[StaticRoute | DynamicRoute]:
        """All registered routes: static ones first, then dynamic ones."""
        dynamic = sorted(
            (route for routes in self._dynamic.values() for route in routes),
            key=lambda route: route.order,
        )
        return [*self._static.values(), *dynamic]

    def resolve(self, method: str, path: str) -> RouteMatch | None:
        """Find the handler chain for *method* and *path*.

        A static route for the exact normalized path always wins, even if
        a dynamic pattern would also match. Returns ``None`` if nothing
        matches.
        """
        method = method.upper()
        path = normalize_path(path)

        static = self._static.get((method, path))
        if static is not None:
            return RouteMatch(route=static, params={})

        best: DynamicRoute | None = None
        best_match: re.Match[str] | None = None
        for route in self._dynamic.get(method, ()):
            # Strictly greater: on a tie the earlier registration stays
            if best is not None and route.specificity <= best.specificity:
                continue
            m = route.regex.match(path)
            if m is not None:
                best, best_match = route, m

        if best is None or best_match is None:
            return None

        params = dict(zip(best.param_names, best_match.groups(), strict=True))
        return RouteMatch(route=best, params=params)

    def match(self, method: str, path: str) -> RouteMatch:
        """Like :meth:`resolve`, but raises ``NotFound`` when nothing matches."""
        result = self.resolve(method, path)
        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")
        return result
