"""Immutable HTTP request.

Everything, body included, is known when the request is built: the
dispatcher drains the ASGI receive channel first, so a Request never
changes after creation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from wren.http.datastructures import Headers, QueryParams, parse_cookies


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request."""

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    cookies: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def content_type(self) -> str:
        """The Content-Type header value, or ``""``."""
        return self.headers.get("content-type") or ""

    @property
    def media_type(self) -> str:
        """The Content-Type without parameters, lower-cased."""
        return self.content_type.split(";", 1)[0].strip().lower()

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], body: bytes = b"") -> Request:
        """Create a Request from an ASGI scope and the fully read body."""
        headers = Headers.from_raw(scope.get("headers", ()))
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=headers,
            query=QueryParams.parse(scope.get("query_string", b"")),
            cookies=parse_cookies(headers.get("cookie", "")),
            body=body,
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
