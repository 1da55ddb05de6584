"""Per-request context handed to handlers and middleware.

A ``Ctx`` wraps one immutable ``Request`` and the response being built
for it. Reads go through small accessors with caller-supplied defaults;
writes go through the send family, of which exactly one call may
succeed per request. ``status()``, ``set()``, and ``cookie()`` adjust the
response envelope and can be called before or after the send.
"""

from __future__ import annotations

import errno
import json as json_module
import mimetypes
import os
from pathlib import Path
from typing import Any

from wren.binding import bind
from wren.errors import MissingFile, ResponseAlreadySent, UnsupportedMediaType
from wren.http.body import BodyKind, body_kind, decode_body
from wren.http.forms import FormData, UploadFile, parse_form_data
from wren.http.request import Request
from wren.http.response import (
    AnyResponse,
    FileResponse,
    Response,
    SetCookie,
    content_disposition,
)
from wren.routing.route import Route, RouteMatch

_UNSET = object()


class Ctx:
    """Request context: request accessors plus the response under construction.

    Usage::

        @app.get("/hello")
        def hello(ctx: Ctx) -> None:
            ctx.send_string("Hello " + ctx.query("name", "Guest"))
    """

    __slots__ = (
        "_body",
        "_cookies",
        "_headers",
        "_parsed",
        "_path_params",
        "_sent_by",
        "_status",
        "locals",
        "request",
        "route",
    )

    def __init__(self, request: Request) -> None:
        self.request = request
        self.route: Route | None = None
        self.locals: dict[str, Any] = {}
        self._path_params: dict[str, str] = {}
        self._parsed: Any = _UNSET
        self._status = 200
        self._headers: list[tuple[str, str]] = []
        self._cookies: list[SetCookie] = []
        self._body: AnyResponse | None = None
        self._sent_by: str | None = None

    def __repr__(self) -> str:
        return f"<Ctx {self.request.method} {self.request.path}>"

    def bind_route(self, match: RouteMatch) -> None:
        """Attach the matched route and its path parameters."""
        self.route = match.route
        self._path_params = dict(match.path_params)

    # -- Request side --

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.request.path

    def get(self, name: str, default: str = "") -> str:
        """Return request header *name* (case-insensitive), or *default*."""
        value = self.request.headers.get(name)
        return default if value is None else value

    def cookies(self, name: str, default: str = "") -> str:
        """Return request cookie *name*, or *default*."""
        return self.request.cookies.get(name, default)

    def query(self, name: str, default: str = "") -> str:
        """Return the first value of query parameter *name*, or *default*."""
        value = self.request.query.get(name)
        return default if value is None else value

    def query_list(self, name: str) -> list[str]:
        """Return every value of query parameter *name*."""
        return self.request.query.get_list(name)

    def params(self, name: str, default: str = "") -> str:
        """Return path parameter *name* from the matched route, or *default*."""
        return self._path_params.get(name, default)

    def all_params(self) -> dict[str, str]:
        return dict(self._path_params)

    def body(self) -> bytes:
        """Return the raw request body."""
        return self.request.body

    def parse_body(self, shape: type | None = None) -> Any:
        """Decode the body by content type, optionally binding it to *shape*.

        ``application/json`` decodes to the JSON value, form encodings to
        ``FormData``, ``application/xml``/``text/xml`` to a dict keyed by
        child tag. With a dataclass *shape*, returns a populated instance.

        Raises:
            UnsupportedMediaType: Unknown content type.
            DecodeError: Malformed body or a field that cannot be bound.
        """
        if self._parsed is _UNSET:
            self._parsed = decode_body(self.request.body, self.request.content_type)
        if shape is None:
            return self._parsed
        return bind(shape, self._parsed)

    body_parser = parse_body

    def form(self) -> FormData:
        """Return the body parsed as form data."""
        if body_kind(self.request.content_type) is not BodyKind.FORM:
            raise UnsupportedMediaType(self.request.content_type)
        if self._parsed is _UNSET:
            self._parsed = parse_form_data(self.request.body, self.request.content_type)
        return self._parsed

    def form_value(self, name: str, default: str = "") -> str:
        """Return form field *name*, or *default* when absent or not a form body."""
        if body_kind(self.request.content_type) is not BodyKind.FORM:
            return default
        value = self.form().get(name)
        return default if value is None else value

    def form_file(self, name: str) -> UploadFile:
        """Return the uploaded file for multipart field *name*.

        Raises ``MissingFile`` if the form has no file under that name.
        """
        upload = self.form().files.get(name)
        if upload is None:
            raise MissingFile(name)
        return upload

    def save_file(self, upload: UploadFile, path: str | os.PathLike[str]) -> Path:
        """Write an uploaded file to *path*, creating parent directories."""
        return upload.save(path)

    # -- Response envelope --

    def status(self, code: int) -> Ctx:
        """Set the response status code."""
        self._status = code
        return self

    def set(self, name: str, value: str) -> Ctx:
        """Set response header *name*, replacing any earlier value."""
        self._headers = [(k, v) for k, v in self._headers if k.lower() != name.lower()]
        self._headers.append((name, value))
        return self

    def cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str = "lax",
    ) -> Ctx:
        """Add a ``Set-Cookie`` to the response."""
        self._cookies.append(
            SetCookie(
                name=name,
                value=value,
                max_age=max_age,
                path=path,
                domain=domain,
                secure=secure,
                httponly=httponly,
                samesite=samesite,
            )
        )
        return self

    # -- Send family: one per request --

    @property
    def sent(self) -> bool:
        """True once a send-family method has completed."""
        return self._sent_by is not None

    def send_string(self, text: str) -> None:
        """Send *text* as ``text/plain``."""
        self._commit("send_string", Response(text.encode("utf-8")))

    def send(self, data: bytes) -> None:
        """Send raw bytes as ``application/octet-stream``."""
        self._commit(
            "send", Response(bytes(data), content_type="application/octet-stream")
        )

    def json(self, value: Any) -> None:
        """Serialize *value* as JSON (sorted keys, compact) and send it."""
        payload = json_module.dumps(
            value, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )
        self._commit(
            "json", Response(payload.encode("utf-8"), content_type="application/json")
        )

    def send_file(self, path: str | os.PathLike[str]) -> None:
        """Stream the file at *path*, typed by its extension."""
        self._commit("send_file", self._file_response(path))

    def download(self, path: str | os.PathLike[str], filename: str | None = None) -> None:
        """Send the file at *path* as an attachment named *filename*."""
        response = self._file_response(path)
        name = filename or response.path.name
        self._commit(
            "download",
            response.with_header("Content-Disposition", content_disposition(name)),
        )

    def redirect(self, location: str, status: int = 302) -> None:
        """Send an empty response with a ``Location`` header."""
        self._status = status
        self._commit("redirect", Response().with_header("Location", location))

    def send_response(self, response: AnyResponse) -> None:
        """Send a prebuilt ``Response`` or ``FileResponse`` as-is."""
        self._status = response.status
        self._commit("send_response", response)

    @property
    def response(self) -> AnyResponse:
        """The response as it would be flushed right now."""
        base: AnyResponse = self._body if self._body is not None else Response(b"")
        result = base.with_status(self._status)
        for name, value in self._headers:
            result = result.with_header(name, value)
        for cookie in self._cookies:
            result = result.with_cookie(cookie)
        return result

    def _commit(self, method: str, response: AnyResponse) -> None:
        if self._sent_by is not None:
            msg = f"{method}() called after {self._sent_by}() already sent the response"
            raise ResponseAlreadySent(msg)
        self._body = response
        self._sent_by = method

    @staticmethod
    def _file_response(path: str | os.PathLike[str]) -> FileResponse:
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(file_path))
        content_type, _ = mimetypes.guess_type(file_path.name)
        return FileResponse(
            path=file_path, content_type=content_type or "application/octet-stream"
        )
