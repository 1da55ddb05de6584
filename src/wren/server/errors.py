"""Error handling pipeline for wren requests.

Maps HTTPError exceptions and unexpected failures to responses, using
registered error handlers or plain defaults. Error handlers get a fresh
``Ctx`` for the same request so they can send even if the failed handler
already had.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from wren._internal.invoke import invoke
from wren.ctx import Ctx
from wren.errors import HTTPError
from wren.http.response import AnyResponse, Response
from wren.server.negotiation import apply_result

logger = logging.getLogger("wren.server")


def find_error_handler(
    exc: Exception,
    status: int,
    error_handlers: dict[int | type, Callable[..., Any]],
) -> Callable[..., Any] | None:
    """Look up a handler by exception class (nearest in the MRO), then status."""
    for cls in type(exc).__mro__:
        handler = error_handlers.get(cls)
        if handler is not None:
            return handler
        if cls is Exception:
            break
    return error_handlers.get(status)


async def call_error_handler(
    handler: Callable[..., Any],
    ctx: Ctx,
    exc: Exception,
    status: int,
) -> AnyResponse:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (ctx), or two (ctx, exc) args and
    may be sync or async. Unless the handler set its own status, the
    response carries *status*.
    """
    error_ctx = Ctx(ctx.request)
    error_ctx.route = ctx.route
    error_ctx.locals.update(ctx.locals)

    params = list(inspect.signature(handler).parameters.values())
    args: tuple[Any, ...] = (error_ctx, exc)[: min(len(params), 2)]
    apply_result(error_ctx, await invoke(handler, *args))

    response = error_ctx.response
    if response.status == 200:
        response = response.with_status(status)
    return response


async def handle_http_error(
    exc: HTTPError,
    ctx: Ctx,
    error_handlers: dict[int | type, Callable[..., Any]],
) -> AnyResponse:
    """Map an HTTPError to a response."""
    logger.debug("%d %s %s %s", exc.status, ctx.method, ctx.path, exc.detail)

    handler = find_error_handler(exc, exc.status, error_handlers)
    if handler is not None:
        return await call_error_handler(handler, ctx, exc, exc.status)

    response = Response(exc.detail.encode("utf-8"), status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    ctx: Ctx,
    error_handlers: dict[int | type, Callable[..., Any]],
    *,
    debug: bool,
) -> AnyResponse:
    """Handle unexpected exceptions as 500 errors.

    The body never carries a traceback; in debug mode it names the
    exception type and message.
    """
    logger.exception("500 %s %s", ctx.method, ctx.path)

    handler = find_error_handler(exc, 500, error_handlers)
    if handler is not None:
        try:
            return await call_error_handler(handler, ctx, exc, 500)
        except Exception:
            logger.exception("Error handler for %s failed", type(exc).__name__)

    body = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    return Response(body.encode("utf-8"), status=500)
