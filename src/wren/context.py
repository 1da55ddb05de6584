"""Request-scoped access to the current ``Ctx`` via ContextVar.

Set by the dispatcher before middleware runs and reset after the
response is built. Accessing it outside a request raises ``LookupError``.

``ContextVar`` is task-local under asyncio and thread-local under
threads, so concurrent requests never see each other's context.
"""

from contextvars import ContextVar

from wren.ctx import Ctx

ctx_var: ContextVar[Ctx] = ContextVar("wren_ctx")
"""The current request context."""


def get_ctx() -> Ctx:
    """Return the current request context.

    Raises ``LookupError`` if called outside a request.
    """
    return ctx_var.get()
