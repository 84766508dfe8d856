"""Routing: a segment trie that resolves (method, path) to a route.

Routes are registered during setup; the table is frozen when the app
handles its first request.
"""

from wren.routing.route import Route, RouteMatch, Segment
from wren.routing.router import Router, parse_path

__all__ = ["Route", "RouteMatch", "Router", "Segment", "parse_path"]
