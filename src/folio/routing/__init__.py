"""Routing: ordered regex route table with first-match-wins dispatch.

Routes are registered during setup and compiled when the app freezes.
"""

from folio.routing.route import Route, RouteMatch, compile_path
from folio.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router", "compile_path"]
