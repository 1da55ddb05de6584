"""Tests for wren.testing: multipart encoding and assertions."""

import pytest

from wren.http.response import Response
from wren.testing import assert_attachment, assert_json, assert_status, encode_multipart


class TestEncodeMultipart:
    def test_content_type_carries_boundary(self) -> None:
        body, content_type = encode_multipart({"a": "1"})
        boundary = content_type.split("boundary=", 1)[1]
        assert body.startswith(f"--{boundary}\r\n".encode())
        assert body.endswith(f"--{boundary}--\r\n".encode())

    def test_file_part_headers(self) -> None:
        body, _ = encode_multipart(files={"doc": ("a.txt", b"hi", "text/plain")})
        assert b'name="doc"; filename="a.txt"' in body
        assert b"Content-Type: text/plain" in body


class TestAssertions:
    def test_assert_status(self) -> None:
        assert_status(Response(status=201), 201)
        with pytest.raises(AssertionError, match="Expected status 200, got 500"):
            assert_status(Response(b"boom", status=500), 200)

    def test_assert_json(self) -> None:
        response = Response(b'{"a":1}', content_type="application/json")
        assert_json(response, {"a": 1})
        with pytest.raises(AssertionError):
            assert_json(Response(b'{"a":1}'), {"a": 1})

    def test_assert_attachment(self) -> None:
        response = Response().with_header("content-disposition", 'attachment; filename="f.txt"')
        assert_attachment(response, "f.txt")
        with pytest.raises(AssertionError):
            assert_attachment(Response(), "f.txt")
