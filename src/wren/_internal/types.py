"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: receives a Ctx, may be sync or async
Handler: TypeAlias = Callable[..., Any]

# Error handler: receives (ctx, error?) and returns a response value or None
ErrorHandler: TypeAlias = Callable[..., Any]
