"""Route definitions and path-pattern compilation."""

import re
from dataclasses import dataclass

from queen._internal.types import Handler
from queen.errors import PatternError
from queen.http.request import normalize_path

# Every segment, and every parameter name after ":": lower-case
# alphanumerics with internal hyphens, 2+ chars
SEGMENT = re.compile(r"[a-z0-9][a-z0-9-]*[a-z0-9]")

# What a dynamic segment matches in a request path
PARAM_CAPTURE = "([^/]+)"


@dataclass(frozen=True, slots=True)
class CompiledPath:
    """Result of compiling a raw route path.

    ``pattern`` is ``None`` for static paths. ``segment_names`` has one
    entry per path segment: the parameter name for dynamic positions,
    ``None`` for fixed ones.
    """

    path: str
    pattern: str | None
    segment_names: tuple[str | None, ...]

    @property
    def is_dynamic(self) -> bool:
        return self.pattern is not None

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(name for name in self.segment_names if name is not None)

    @property
    def specificity(self) -> int:
        """Count of fixed segments; higher wins when patterns overlap."""
        return sum(1 for name in self.segment_names if name is None)


def compile_path(raw_path: str) -> CompiledPath:
    """Normalize *raw_path* and compile its dynamic segments.

    Examples::

        "/users"            -> path "/users/", pattern None
        "/users/:id"        -> pattern "^/users/([^/]+)/$", names (None, "id")
        "Users/:id/Posts"   -> path "/users/:id/posts/"

    Raises ``PatternError`` if any segment is outside the grammar.
    """
    path = normalize_path(raw_path)
    segments = path.strip("/").split("/") if path != "/" else []

    names: list[str | None] = []
    parts: list[str] = []
    for segment in segments:
        if segment.startswith(":"):
            name = segment[1:]
            if not SEGMENT.fullmatch(name):
                msg = (
                    f"Invalid parameter segment {segment!r} in route {raw_path!r}: names use "
                    "lower-case letters, digits and inner hyphens, at least 2 characters."
                )
                raise PatternError(msg)
            names.append(name)
            parts.append(PARAM_CAPTURE)
        else:
            if not SEGMENT.fullmatch(segment):
                msg = (
                    f"Invalid segment {segment!r} in route {raw_path!r}: segments use "
                    "lower-case letters, digits and inner hyphens, at least 2 characters."
                )
                raise PatternError(msg)
            names.append(None)
            parts.append(re.escape(segment))

    if all(name is None for name in names):
        return CompiledPath(path=path, pattern=None, segment_names=tuple(names))

    pattern = "^/" + "/".join(parts) + "/$"
    return CompiledPath(path=path, pattern=pattern, segment_names=tuple(names))


@dataclass(frozen=True, slots=True)
class StaticRoute:
    """A fixed (method, path) binding."""

    method: str
    path: str
    handlers: tuple[Handler, ...]


@dataclass(frozen=True, slots=True)
class DynamicRoute:
    """A parameterized route, matched by regular expression.

    ``order`` is the registration index, used to break specificity ties.
    """

    method: str
    path: str
    regex: re.Pattern[str]
    specificity: int
    segment_names: tuple[str | None, ...]
    handlers: tuple[Handler, ...]
    order: int

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(name for name in self.segment_names if name is not None)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful resolution."""

    route: StaticRoute | DynamicRoute
    params: dict[str, str]

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self.route.handlers
