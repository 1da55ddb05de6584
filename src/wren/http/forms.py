"""Form bodies: URL-encoded and multipart.

URL-encoded forms use stdlib ``urllib.parse``. Multipart bodies go through
``python-multipart``'s callback parser; file parts become ``UploadFile``
objects held in memory.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import parse_qsl

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from wren.errors import DecodeError, UnsupportedMediaType
from wren.http.datastructures import MultiDict


@dataclass(frozen=True, slots=True)
class UploadFile:
    """A file part from a multipart form submission."""

    field: str
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def save(self, path: str | Path) -> Path:
        """Write the content to *path*, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.content)
        return target

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(MultiDict):
    """Parsed form fields plus uploaded files.

    Usage::

        form = ctx.parse_body()
        username = form["username"]
        avatar = form.files.get("avatar")  # UploadFile or None
    """

    __slots__ = ("_files",)

    def __init__(
        self,
        pairs: list[tuple[str, str]] | None = None,
        files: dict[str, UploadFile] | None = None,
    ) -> None:
        super().__init__(pairs or ())
        object.__setattr__(self, "_files", files or {})

    @property
    def files(self) -> Mapping[str, UploadFile]:
        """Uploaded files by field name."""
        return self._files


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a form body according to its Content-Type.

    Raises ``UnsupportedMediaType`` for non-form content types and
    ``DecodeError`` for malformed bodies.
    """
    media_type = content_type.split(";", 1)[0].strip().lower()

    if media_type == "application/x-www-form-urlencoded":
        return _parse_urlencoded(body)
    if media_type == "multipart/form-data":
        return _parse_multipart(body, content_type)

    raise UnsupportedMediaType(content_type)


def _parse_urlencoded(body: bytes) -> FormData:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("Form body is not valid UTF-8", offset=exc.start) from exc
    return FormData(parse_qsl(text, keep_blank_values=True))


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    _, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if not boundary:
        raise DecodeError("Multipart body has no boundary parameter")

    fields: list[tuple[str, str]] = []
    files: dict[str, UploadFile] = {}

    # Per-part state, reset in on_part_begin
    headers: dict[str, str] = {}
    header_field = bytearray()
    header_value = bytearray()
    data = bytearray()

    def on_part_begin() -> None:
        headers.clear()
        data.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        data.extend(chunk[start:end])

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        headers[header_field.decode("latin-1").lower()] = header_value.decode("latin-1")
        header_field.clear()
        header_value.clear()

    def on_part_end() -> None:
        _, params = parse_options_header(headers.get("content-disposition", ""))
        name = params.get(b"name")
        if name is None:
            return
        field = name.decode("utf-8")
        filename = params.get(b"filename")
        if filename is not None:
            files[field] = UploadFile(
                field=field,
                filename=filename.decode("utf-8"),
                content_type=headers.get("content-type", "application/octet-stream"),
                content=bytes(data),
            )
        else:
            fields.append((field, data.decode("utf-8", errors="replace")))

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_part_begin,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
            "on_header_end": on_header_end,
        },
    )
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        offset = exc.offset if exc.offset >= 0 else None
        raise DecodeError(f"Malformed multipart body: {exc}", offset=offset) from exc

    return FormData(fields, files)
