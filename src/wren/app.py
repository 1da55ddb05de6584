"""Wren application class.

Pairs a Router with the ASGI dispatcher. Routes, middleware, and error
handlers can be registered at any time; the router swaps its tables
copy-on-write and the middleware stack is captured per request, so
registration never races with requests already in flight.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.types import ErrorHandler, Handler
from wren.config import AppConfig
from wren.middleware.protocol import Middleware
from wren.routing.group import Group, join_paths
from wren.routing.route import Route
from wren.routing.router import Router
from wren.server.dispatcher import handle_request

logger = logging.getLogger("wren.server")

ALL_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


class App:
    """The wren application.

    Usage::

        app = App()

        @app.get("/users/:userId/orders/:orderId")
        def order(ctx):
            ctx.send_string(f"Get Order {ctx.params('orderId')} from {ctx.params('userId')}")

    Handlers receive a ``Ctx`` and may be ``def`` or ``async def``.
    """

    __slots__ = (
        "_error_handlers",
        "_middleware",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router = Router(strict=self.config.strict_routes)
        self._middleware: tuple[tuple[str, Middleware], ...] = ()
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []

    # -- Route registration --

    def add_route(self, method: str, pattern: str, handler: Handler) -> Route:
        """Register *handler* for one method and pattern."""
        return self._router.register(method, join_paths("", pattern), handler)

    def route(
        self, pattern: str, *, methods: list[str] | None = None
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            pattern: URL pattern. Use ``:name`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
        """

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add_route(method, pattern, func)
            return func

        return decorator

    def _register(self, methods: tuple[str, ...], pattern: str, handler: Handler | None) -> Any:
        if handler is None:
            return self.route(pattern, methods=list(methods))
        for method in methods:
            self.add_route(method, pattern, handler)
        return handler

    def get(self, pattern: str, handler: Handler | None = None) -> Any:
        """Register a GET route directly or as a decorator."""
        return self._register(("GET",), pattern, handler)

    def post(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register(("POST",), pattern, handler)

    def put(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register(("PUT",), pattern, handler)

    def patch(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register(("PATCH",), pattern, handler)

    def delete(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register(("DELETE",), pattern, handler)

    def head(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register(("HEAD",), pattern, handler)

    def options(self, pattern: str, handler: Handler | None = None) -> Any:
        return self._register(("OPTIONS",), pattern, handler)

    def all(self, pattern: str, handler: Handler | None = None) -> Any:
        """Register a route for every standard method."""
        return self._register(ALL_METHODS, pattern, handler)

    def group(self, prefix: str, *handlers: Handler) -> Group:
        """Create a route group under *prefix*.

        *handlers* run as middleware for every path under the prefix.
        """
        return Group(self, prefix, *handlers)

    @property
    def routes(self) -> list[Route]:
        """All registered routes in registration order."""
        return self._router.routes

    # -- Middleware and error handlers --

    def add_middleware(self, middleware: Middleware, *, prefix: str = "") -> None:
        """Append *middleware*, optionally limited to paths under *prefix*."""
        scope = join_paths("", prefix) if prefix else ""
        self._middleware = (*self._middleware, (scope, middleware))

    use = add_middleware

    def error(
        self, code_or_exception: int | type[Exception]
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler for a status code or exception type.

        The handler may take ``()``, ``(ctx)``, or ``(ctx, exc)``::

            @app.error(404)
            def not_found(ctx):
                ctx.status(404).send_string("nothing here")
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run on ASGI lifespan startup (sync or async)."""
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run on ASGI lifespan shutdown (sync or async)."""
        self._shutdown_hooks.append(func)
        return func

    async def run_startup_hooks(self) -> None:
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def run_shutdown_hooks(self) -> None:
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Serving --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        app_path: str | None = None,
    ) -> None:
        """Serve the app over HTTP with pounce.

        Args:
            host: Override bind host.
            port: Override bind port.
            app_path: ``"module:attribute"`` import string for this app.
                With ``debug=True`` it enables reload on code changes.
        """
        from wren.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            app_path=app_path,
            reload=self.config.debug and app_path is not None,
            log_level=self.config.log_level,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_handlers=self._error_handlers,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.run_startup_hooks()
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.run_shutdown_hooks()
                await send({"type": "lifespan.shutdown.complete"})
                return
