"""ASGI dispatcher: one request in, one response out.

The only component that touches raw ASGI HTTP messages. Reads the body,
builds the immutable Request and a fresh Ctx, runs middleware and the
matched handler, maps failures to status codes, and flushes the result
through the sender.
"""

import logging
from collections.abc import Awaitable, Callable
from contextvars import Token
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren._internal.invoke import invoke
from wren.config import AppConfig
from wren.context import ctx_var
from wren.ctx import Ctx
from wren.errors import HTTPError, PayloadTooLarge
from wren.http.request import Request
from wren.http.response import AnyResponse
from wren.middleware.protocol import Middleware, Next
from wren.routing.router import Router
from wren.server.errors import handle_http_error, handle_internal_error
from wren.server.negotiation import apply_result
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")


async def read_body(receive: Receive, limit: int) -> bytes:
    """Drain the ASGI receive channel.

    Raises ``PayloadTooLarge`` as soon as the body passes *limit* bytes.
    """
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunk = message.get("body", b"")
        if chunk:
            size += len(chunk)
            if size > limit:
                raise PayloadTooLarge(limit)
            chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def prefix_applies(prefix: str, path: str) -> bool:
    """True when *path* is *prefix* itself or lies beneath it."""
    if not prefix or prefix == "/":
        return True
    return path == prefix or path.startswith(prefix + "/")


def build_chain(
    router: Router,
    middleware: tuple[tuple[str, Middleware], ...],
) -> Callable[[Ctx], Awaitable[None]]:
    """Wrap route dispatch in the prefix-scoped middleware stack."""

    async def dispatch(ctx: Ctx) -> None:
        match = router.match(ctx.method, ctx.path)
        ctx.bind_route(match)
        apply_result(ctx, await invoke(match.route.handler, ctx))

    handler: Next = dispatch
    for prefix, mw in reversed(middleware):

        async def step(
            ctx: Ctx, _mw: Any = mw, _next: Next = handler, _prefix: str = prefix
        ) -> None:
            if not prefix_applies(_prefix, ctx.path):
                await _next(ctx)
                return
            await _mw(ctx, _next)

        handler = step
    return handler


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[tuple[str, Middleware], ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    failure: HTTPError | None = None
    try:
        body = await read_body(receive, config.body_limit)
    except PayloadTooLarge as exc:
        body = b""
        failure = exc

    request = Request.from_asgi(scope, body)
    ctx = Ctx(request)
    token: Token[Ctx] = ctx_var.set(ctx)

    response: AnyResponse
    try:
        if failure is not None:
            raise failure
        await build_chain(router, middleware)(ctx)
        response = ctx.response
    except HTTPError as exc:
        response = await handle_http_error(exc, ctx, error_handlers)
    except Exception as exc:
        response = await handle_internal_error(exc, ctx, error_handlers, debug=config.debug)
    finally:
        ctx_var.reset(token)

    await flush(response, send, ctx, config)


async def flush(response: AnyResponse, send: Send, ctx: Ctx, config: AppConfig) -> None:
    """Send *response*, or a plain 500 if it fails before the first message.

    Once ``http.response.start`` has gone out the status cannot change,
    so later failures propagate to the server.
    """
    started = False

    async def tracked_send(message: dict[str, Any]) -> None:
        nonlocal started
        started = True
        await send(message)

    head = ctx.method == "HEAD"
    try:
        await send_response(response, tracked_send, head=head, chunk_size=config.file_chunk_size)
    except Exception as exc:
        if started:
            raise
        # Error handlers are skipped here; the default 500 always encodes
        fallback = await handle_internal_error(exc, ctx, {}, debug=config.debug)
        await send_response(fallback, send, head=head)
