"""Invoke helpers: call sync or async handlers uniformly.

Wren handlers can be ``def`` or ``async def``. Any code that calls a
user-provided handler goes through ``invoke`` so the sync/async check
lives in exactly one place.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
