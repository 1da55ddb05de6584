"""Tests for wren.http.response: chainable immutable responses."""

from pathlib import Path

from wren.http.response import FileResponse, Response, SetCookie


class TestResponse:
    def test_defaults(self) -> None:
        response = Response(b"hi")
        assert response.status == 200
        assert response.content_type == "text/plain; charset=utf-8"
        assert response.text == "hi"

    def test_with_status_returns_copy(self) -> None:
        original = Response(b"x")
        changed = original.with_status(201)
        assert changed.status == 201
        assert original.status == 200

    def test_with_header_replaces_same_name(self) -> None:
        response = Response().with_header("X-A", "1").with_header("x-a", "2")
        assert response.headers == (("x-a", "2"),)
        assert response.header("X-A") == "2"

    def test_header_default(self) -> None:
        assert Response().header("x-missing", "none") == "none"

    def test_header_content_type(self) -> None:
        response = Response().with_content_type("application/json")
        assert response.header("Content-Type") == "application/json"

    def test_with_cookie_appends(self) -> None:
        response = Response().with_cookie(SetCookie("a", "1")).with_cookie(SetCookie("b", "2"))
        assert [c.name for c in response.cookies] == ["a", "b"]


class TestFileResponse:
    def test_size(self, tmp_path: Path) -> None:
        path = tmp_path / "data.bin"
        path.write_bytes(b"12345")
        assert FileResponse(path).size == 5

    def test_chainable(self, tmp_path: Path) -> None:
        path = tmp_path / "data.bin"
        path.write_bytes(b"")
        response = FileResponse(path).with_header("Content-Disposition", "attachment")
        assert isinstance(response, FileResponse)
        assert response.header("content-disposition") == "attachment"


class TestSetCookie:
    def test_defaults(self) -> None:
        assert SetCookie("name", "Akbar").to_header_value() == (
            "name=Akbar; Path=/; SameSite=lax; HttpOnly"
        )

    def test_all_attributes(self) -> None:
        cookie = SetCookie(
            "sid",
            "abc",
            max_age=60,
            domain="example.com",
            secure=True,
            httponly=False,
            samesite="strict",
        )
        assert cookie.to_header_value() == (
            "sid=abc; Max-Age=60; Path=/; Domain=example.com; SameSite=strict; Secure"
        )
