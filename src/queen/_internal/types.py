"""Shared type aliases used across queen modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler or plugin, called with (request, response[, next])
Handler: TypeAlias = Callable[..., Any]

HTTP_METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
