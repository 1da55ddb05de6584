"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal: ``/users``    (is_param=False, value="users")
    Param:   ``/:userId``  (is_param=True, value="userId")
    """

    value: str
    is_param: bool = False


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route definition."""

    method: str
    pattern: str
    segments: tuple[PathSegment, ...]
    handler: Callable[..., Any]

    @property
    def param_count(self) -> int:
        """Number of parameter segments; fewer means more specific."""
        return sum(1 for seg in self.segments if seg.is_param)

    @property
    def shape(self) -> tuple[str | None, ...]:
        """Literal values with ``None`` at placeholder positions.

        Two patterns with the same shape match exactly the same paths.
        """
        return tuple(None if seg.is_param else seg.value for seg in self.segments)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
