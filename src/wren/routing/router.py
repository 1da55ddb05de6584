"""Router with ordered per-method tables and most-specific-first matching.

Each method owns a tuple of ``(index, Route)`` entries. Registration builds
a new tuple under a lock and swaps it in, so ``match()`` always reads a
consistent snapshot without locking.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from wren.errors import ConfigurationError, ConflictError, NotFound
from wren.routing.route import PathSegment, Route, RouteMatch

logger = logging.getLogger("wren.routing")

_Entry = tuple[int, Route]


def split_path(path: str) -> list[str]:
    """Split a URL path into its non-empty segments."""
    return [part for part in path.split("/") if part]


def parse_pattern(pattern: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/"                               -> ()
        "/users"                          -> (PathSegment("users"),)
        "/users/:userId/orders/:orderId"  -> (users, :userId, orders, :orderId)
    """
    segments: list[PathSegment] = []
    for part in split_path(pattern):
        if part.startswith("{") and part.endswith("}"):
            msg = (
                f"Route pattern {pattern!r} uses {{param}} syntax. "
                f"Wren expects :param, e.g. '/users/:id'."
            )
            raise ConfigurationError(msg)
        if part.startswith(":"):
            name = part[1:]
            if not name:
                msg = f"Route pattern {pattern!r} has a parameter without a name."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=name, is_param=True))
        else:
            segments.append(PathSegment(value=part))
    return tuple(segments)


class Router:
    """Route table keyed by method, matched most-specific first.

    Usage::

        router = Router()
        router.register("GET", "/users/:id", handler)
        match = router.match("GET", "/users/42")
        match.path_params  # {"id": "42"}
    """

    __slots__ = ("_counter", "_lock", "_strict", "_tables")

    def __init__(self, *, strict: bool = False) -> None:
        self._tables: dict[str, tuple[_Entry, ...]] = {}
        self._lock = threading.Lock()
        self._counter = 0
        self._strict = strict

    def register(self, method: str, pattern: str, handler: Callable[..., Any]) -> Route:
        """Build a Route from its parts and add it."""
        route = Route(
            method=method.upper(),
            pattern=pattern,
            segments=parse_pattern(pattern),
            handler=handler,
        )
        self.add(route)
        return route

    def add(self, route: Route) -> None:
        """Add a route to its method table.

        A route with the same shape as an existing one replaces it in place
        (keeping the original registration order), or raises
        ``ConflictError`` when the router is strict.
        """
        with self._lock:
            table = list(self._tables.get(route.method, ()))
            shape = route.shape
            for i, (index, existing) in enumerate(table):
                if existing.shape != shape:
                    continue
                if self._strict:
                    raise ConflictError(route.method, route.pattern, existing.pattern)
                logger.warning(
                    "Route %s %s replaces %s", route.method, route.pattern, existing.pattern
                )
                table[i] = (index, route)
                break
            else:
                table.append((self._counter, route))
                self._counter += 1
                logger.debug("Registered %s %s", route.method, route.pattern)
            # Most specific first, then registration order
            table.sort(key=lambda entry: (entry[1].param_count, entry[0]))
            self._tables[route.method] = tuple(table)

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes in registration order."""
        entries = [entry for table in self._tables.values() for entry in table]
        entries.sort(key=lambda entry: entry[0])
        return [route for _, route in entries]

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path.

        Returns a ``RouteMatch`` on success. ``HEAD`` falls back to the
        ``GET`` table. Raises ``NotFound`` if nothing matches.
        """
        method = method.upper()
        parts = split_path(path)

        result = self._match_table(self._tables.get(method, ()), parts)
        if result is None and method == "HEAD":
            result = self._match_table(self._tables.get("GET", ()), parts)
        if result is None:
            raise NotFound()
        return result

    @staticmethod
    def _match_table(table: tuple[_Entry, ...], parts: list[str]) -> RouteMatch | None:
        """Return the first route in *table* whose pattern fits *parts*."""
        for _, route in table:
            if len(route.segments) != len(parts):
                continue
            params: dict[str, str] = {}
            for seg, part in zip(route.segments, parts, strict=True):
                if seg.is_param:
                    params[seg.value] = part
                elif seg.value != part:
                    break
            else:
                return RouteMatch(route=route, path_params=params)
        return None
