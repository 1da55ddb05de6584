"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(ctx: Ctx, next: Next) -> None: ...

No base class required. A middleware that sends a response without
awaiting ``next(ctx)`` ends the request there.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from wren.ctx import Ctx

# The next step in the middleware chain
type Next = Callable[[Ctx], Awaitable[None]]


class Middleware(Protocol):
    """Protocol for wren middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(ctx: Ctx, next: Next) -> None:
            start = time.monotonic()
            await next(ctx)
            ctx.set("X-Time", f"{time.monotonic() - start:.3f}")

        # Class middleware
        class RequireToken:
            async def __call__(self, ctx: Ctx, next: Next) -> None:
                ...
    """

    async def __call__(self, ctx: Ctx, next: Next) -> None: ...
