"""Routing — static lookup table plus specificity-ranked dynamic patterns.

Routes are registered during setup and the table is sealed when the app
starts serving.
"""

from queen.routing.route import DynamicRoute, RouteMatch, StaticRoute, compile_path
from queen.routing.router import Router

__all__ = ["DynamicRoute", "RouteMatch", "Router", "StaticRoute", "compile_path"]
