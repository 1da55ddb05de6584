"""ASGI response sending: translates wren responses to ASGI messages.

In-memory responses go out as a single body message; file responses are
streamed in chunks, yielding to the event loop between reads. Everything
that can fail before the first byte (header encoding, opening the file)
happens before ``http.response.start`` is sent.
"""

import logging
import os
from typing import Any, BinaryIO

from wren._internal.asgi import Send
from wren.http.response import AnyResponse, FileResponse

logger = logging.getLogger("wren.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _raw_headers(response: AnyResponse, content_length: int) -> list[tuple[bytes, bytes]]:
    raw: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
        if name.lower() != "content-length"
    )
    raw.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )
    raw.append((b"content-length", str(content_length).encode("latin-1")))
    return raw


def start_message(response: AnyResponse, content_length: int) -> dict[str, Any]:
    """Build the ``http.response.start`` message.

    Raises ``UnicodeEncodeError`` if a header value is not latin-1.
    """
    return {
        "type": "http.response.start",
        "status": response.status,
        "headers": _raw_headers(response, content_length),
    }


async def send_response(
    response: AnyResponse,
    send: Send,
    *,
    head: bool = False,
    chunk_size: int = 64 * 1024,
) -> None:
    """Translate a wren response into ASGI ``send()`` calls.

    ``head=True`` keeps the headers (including Content-Length) but
    sends no body.
    """
    body_allowed = _body_allowed(response.status)
    with_body = body_allowed and not head

    if isinstance(response, FileResponse):
        if not with_body:
            size = response.size if body_allowed else 0
            await send(start_message(response, size))
            await send({"type": "http.response.body", "body": b""})
            return
        with response.path.open("rb") as fh:
            start = start_message(response, os.fstat(fh.fileno()).st_size)
            await send(start)
            await _stream_file(fh, send, chunk_size)
        logger.debug("Streamed %s", response.path)
        return

    body = response.body if body_allowed else b""
    await send(start_message(response, len(body)))
    await send({"type": "http.response.body", "body": body if with_body else b""})


async def _stream_file(fh: BinaryIO, send: Send, chunk_size: int) -> None:
    """Send the file in ``chunk_size`` pieces, closing with an empty body."""
    while chunk := fh.read(chunk_size):
        await send({"type": "http.response.body", "body": chunk, "more_body": True})
    await send({"type": "http.response.body", "body": b"", "more_body": False})
