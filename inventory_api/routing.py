"""
Inventory API — Route Table
=============================

What:  Explicit, ordered table of (method, pattern) → handler.
Why:   Route order is a correctness concern here: a general parametric route
       must never swallow a more specific one (GET /inventory/:item_id must
       not answer GET /inventory/3/photo). Keeping the table explicit lets us
       check that at registration time and lets the 405 fallback ask which
       methods exist for a path shape.
How:   Patterns use ":name" for one-level parameters. The table matches
       first-come-first-served and is materialized, in order, into a FastAPI
       APIRouter, which does the actual dispatch.

Pattern examples:
    /inventory                → exact
    /inventory/:item_id       → one parameter segment
    /inventory/:item_id/photo → parameter plus a literal suffix
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import APIRouter


def _split(path: str) -> Tuple[str, ...]:
    return tuple(segment for segment in path.strip("/").split("/") if segment)


@dataclass(frozen=True)
class Route:
    """One registered route."""

    method: str
    pattern: str
    endpoint: Callable[..., Any]
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def segments(self) -> Tuple[str, ...]:
        return _split(self.pattern)

    @property
    def param_names(self) -> List[str]:
        return [s[1:] for s in self.segments if s.startswith(":")]

    @property
    def path_template(self) -> str:
        """The pattern in FastAPI syntax: /inventory/:item_id → /inventory/{item_id}"""
        parts = [f"{{{s[1:]}}}" if s.startswith(":") else s for s in self.segments]
        return "/" + "/".join(parts)

    def match_path(self, path: str) -> Optional[Dict[str, str]]:
        """Extract path parameters, or None if the path has another shape."""
        segments = _split(path)
        if len(segments) != len(self.segments):
            return None
        params: Dict[str, str] = {}
        for expected, actual in zip(self.segments, segments):
            if expected.startswith(":"):
                params[expected[1:]] = actual
            elif expected != actual:
                return None
        return params

    def covers(self, other: "Route") -> bool:
        """True if every path matching `other` also matches this route."""
        if len(self.segments) != len(other.segments):
            return False
        for mine, theirs in zip(self.segments, other.segments):
            if mine.startswith(":"):
                continue
            if theirs.startswith(":") or mine != theirs:
                return False
        return True


class RouteTable:
    """
    Ordered route registry.

    Usage:
        routes = RouteTable()

        @routes.route("GET", "/inventory/:item_id/photo")
        async def get_photo(item_id: str): ...

        @routes.route("GET", "/inventory/:item_id")
        async def get_item(item_id: str): ...

        app.include_router(routes.build_router())
    """

    def __init__(self) -> None:
        self._routes: List[Route] = []

    def __iter__(self):
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def register(
        self,
        method: str,
        pattern: str,
        endpoint: Callable[..., Any],
        **options: Any,
    ) -> Route:
        """
        Append a route.

        Raises:
            ValueError: an earlier route with the same method already matches
                every path this one would, so this route could never be reached.
        """
        route = Route(method=method.upper(), pattern=pattern, endpoint=endpoint, options=options)
        for earlier in self._routes:
            if earlier.method == route.method and earlier.covers(route):
                raise ValueError(
                    f"{route.method} {pattern} is shadowed by earlier route "
                    f"{earlier.method} {earlier.pattern}; register the more specific route first"
                )
        self._routes.append(route)
        return route

    def route(self, method: str, pattern: str, **options: Any):
        """Decorator form of register()."""

        def decorator(endpoint: Callable[..., Any]) -> Callable[..., Any]:
            self.register(method, pattern, endpoint, **options)
            return endpoint

        return decorator

    def match(self, method: str, path: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        """First route whose method and pattern match, with its parameters."""
        method = method.upper()
        for route in self._routes:
            if route.method != method:
                continue
            params = route.match_path(path)
            if params is not None:
                return route, params
        return None

    def allowed_methods(self, path: str) -> List[str]:
        """Methods registered for any pattern matching this path shape."""
        methods: List[str] = []
        for route in self._routes:
            if route.method not in methods and route.match_path(path) is not None:
                methods.append(route.method)
        return methods

    def build_router(self, **router_options: Any) -> APIRouter:
        """Materialize the table, in registration order, as a FastAPI router."""
        router = APIRouter(**router_options)
        for route in self._routes:
            router.add_api_route(
                route.path_template,
                route.endpoint,
                methods=[route.method],
                **route.options,
            )
        return router
