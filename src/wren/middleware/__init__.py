"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(ctx: Ctx, next: Next) -> None

Register with ``app.add_middleware(mw, prefix="/api")``; a prefix limits
it to that path and everything beneath it.
"""

from wren.middleware.protocol import Middleware, Next

__all__ = ["Middleware", "Next"]
