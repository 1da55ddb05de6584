"""Wren exception hierarchy.

Shared across Router, Ctx, the dispatcher, and middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a route pattern or app setting is invalid."""


class ConflictError(WrenError):
    """Raised by a strict router when a route shape is registered twice."""

    def __init__(self, method: str, pattern: str, existing: str) -> None:
        self.method = method
        self.pattern = pattern
        self.existing = existing
        super().__init__(
            f"Route {method} {pattern!r} conflicts with already registered {existing!r}"
        )


class ResponseAlreadySent(WrenError):  # noqa: N818
    """Raised when a handler calls a second send-family method."""


class MissingFile(WrenError):  # noqa: N818
    """Raised when a multipart form has no file under the requested field."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"No uploaded file for field {field!r}")


class BodyError(WrenError):
    """Base for request body decoding failures."""


class DecodeError(BodyError):
    """The body is malformed for its declared content type.

    ``offset`` is the byte offset of the problem when the decoder reports
    one, otherwise ``None``.
    """

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class UnsupportedMediaType(BodyError):  # noqa: N818
    """The body's content type has no decoder."""

    def __init__(self, content_type: str) -> None:
        self.content_type = content_type
        super().__init__(f"Unsupported content type: {content_type or '<none>'!r}")


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. The dispatcher catches
    these and answers with ``status``, ``detail`` as body, and ``headers``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request method and path."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(status=404, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: the request body exceeds ``AppConfig.body_limit``."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")
