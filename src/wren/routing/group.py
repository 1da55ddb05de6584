"""Route groups: registration-time path prefixes.

A Group holds no runtime state: every route registered through it is
added to the app's router with the prefix already joined on.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from wren._internal.invoke import invoke
from wren._internal.types import Handler
from wren.routing.router import split_path
from wren.server.negotiation import apply_result

if TYPE_CHECKING:
    from wren.app import App
    from wren.routing.route import Route


def join_paths(prefix: str, pattern: str) -> str:
    """Join a group prefix and a route pattern into one normalized pattern."""
    parts = split_path(prefix) + split_path(pattern)
    return "/" + "/".join(parts)


class Group:
    """A path-prefix scope for route registration.

    Handlers passed at creation run as middleware scoped to the prefix,
    the same way ``App.group()`` treats them::

        api = app.group("/api")

        @api.get("/users/:id")
        def user(ctx): ...

        api.group("/hello", hello_world)  # answers /api/hello
    """

    __slots__ = ("_app", "prefix")

    def __init__(self, app: App, prefix: str, *handlers: Handler) -> None:
        self._app = app
        self.prefix = join_paths("", prefix)
        for handler in handlers:
            app.add_middleware(handler_middleware(handler), prefix=self.prefix)

    def __repr__(self) -> str:
        return f"Group({self.prefix!r})"

    def group(self, prefix: str, *handlers: Handler) -> Group:
        """Create a nested group under this one."""
        return Group(self._app, join_paths(self.prefix, prefix), *handlers)

    def add(self, method: str, pattern: str, handler: Handler) -> Route:
        """Register *handler* for *method* under this group's prefix."""
        return self._app.add_route(method, join_paths(self.prefix, pattern), handler)

    def route(
        self, pattern: str, *, methods: list[str] | None = None
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator. Methods default to ``["GET"]``."""
        return self._app.route(join_paths(self.prefix, pattern), methods=methods)

    def get(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._app.get(join_paths(self.prefix, pattern), handler)

    def post(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._app.post(join_paths(self.prefix, pattern), handler)

    def put(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._app.put(join_paths(self.prefix, pattern), handler)

    def patch(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._app.patch(join_paths(self.prefix, pattern), handler)

    def delete(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._app.delete(join_paths(self.prefix, pattern), handler)

    def all(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._app.all(join_paths(self.prefix, pattern), handler)


def handler_middleware(handler: Handler) -> Callable[..., Any]:
    """Adapt a plain ``handler(ctx)`` into prefix middleware.

    The handler runs first; if it did not send a response the request
    continues down the chain.
    """

    async def middleware(ctx: Any, next: Any) -> None:
        apply_result(ctx, await invoke(handler, ctx))
        if not ctx.sent:
            await next(ctx)

    middleware.__name__ = getattr(handler, "__name__", "handler_middleware")
    return middleware
