"""HTTP responses with a chainable ``.with_*()`` API.

Each transformation returns a new object. ``Response`` carries its body
in memory; ``FileResponse`` carries a path the sender streams in chunks.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Self
from urllib.parse import quote


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a response."""

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str = "lax"

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        attrs: list[tuple[str, object]] = [
            ("Max-Age", self.max_age),
            ("Path", self.path or None),
            ("Domain", self.domain),
            ("SameSite", self.samesite or None),
        ]
        parts = [f"{self.name}={self.value}"]
        parts.extend(f"{key}={value}" for key, value in attrs if value is not None)
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        return "; ".join(parts)


class _Chainable:
    """Shared ``.with_*()`` methods for the frozen response dataclasses."""

    __slots__ = ()

    status: int
    content_type: str
    headers: tuple[tuple[str, str], ...]
    cookies: tuple[SetCookie, ...]

    def with_status(self, status: int) -> Self:
        """Return a copy with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Self:
        """Return a copy with *name* set to *value*, replacing earlier values."""
        kept = tuple((k, v) for k, v in self.headers if k.lower() != name.lower())
        return replace(self, headers=(*kept, (name, value)))

    def with_content_type(self, content_type: str) -> Self:
        """Return a copy with a different content type."""
        return replace(self, content_type=content_type)

    def with_cookie(self, cookie: SetCookie) -> Self:
        """Return a copy with an additional ``Set-Cookie``."""
        return replace(self, cookies=(*self.cookies, cookie))

    def header(self, name: str, default: str | None = None) -> str | None:
        """Look up a response header (case-insensitive)."""
        if name.lower() == "content-type":
            return self.content_type
        for key, value in self.headers:
            if key.lower() == name.lower():
                return value
        return default


@dataclass(frozen=True, slots=True)
class Response(_Chainable):
    """An in-memory HTTP response."""

    body: bytes = b""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")


@dataclass(frozen=True, slots=True)
class FileResponse(_Chainable):
    """A response whose body is the content of a file on disk."""

    path: Path
    status: int = 200
    content_type: str = "application/octet-stream"
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    @property
    def size(self) -> int:
        return self.path.stat().st_size


type AnyResponse = Response | FileResponse


def content_disposition(filename: str) -> str:
    """Build an ``attachment`` Content-Disposition value (RFC 6266).

    ``"`` and ``\\`` are escaped inside the quoted name. Non-ASCII names get
    an ASCII fallback with ``_`` in place of each non-ASCII character, plus
    a ``filename*`` parameter carrying the UTF-8 name percent-encoded.
    """
    if filename.isascii():
        return f'attachment; filename="{_quote_string(filename)}"'
    fallback = "".join(ch if ch.isascii() else "_" for ch in filename)
    return (
        f'attachment; filename="{_quote_string(fallback)}"; '
        f"filename*=UTF-8''{quote(filename, safe='')}"
    )


def _quote_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')
