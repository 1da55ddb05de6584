"""Handler return values: mapped onto the context's send family.

Handlers normally write through ``Ctx``; returning a value is shorthand
for the matching send call. isinstance-based dispatch, fully predictable:

1. ``None``               -> nothing (the ctx response stands)
2. ``Response``/``FileResponse`` -> sent as-is
3. ``(value, int)``       -> apply value, then override status
4. ``str``                -> ``send_string``
5. ``bytes``              -> ``send``
6. ``dict`` / ``list``    -> ``json``

Returning a value after already sending counts as a second send.
"""

from typing import Any

from wren.ctx import Ctx
from wren.http.response import FileResponse, Response


def apply_result(ctx: Ctx, value: Any) -> None:
    """Apply a handler's return *value* to *ctx*."""
    match value:
        case None:
            return
        case Response() | FileResponse():
            ctx.send_response(value)
        case (inner, int() as status) if isinstance(value, tuple):
            apply_result(ctx, inner)
            ctx.status(status)
        case str():
            ctx.send_string(value)
        case bytes() | bytearray():
            ctx.send(bytes(value))
        case dict() | list():
            ctx.json(value)
        case _:
            msg = (
                f"Handler returned unsupported type {type(value).__name__!r}. "
                f"Use a ctx send method or return str, bytes, dict, list, or Response."
            )
            raise TypeError(msg)
