"""Wren: a small ASGI web framework with a context-object API.

Handlers receive a ``Ctx`` that reads the request and sends exactly one
response::

    from wren import App

    app = App()

    @app.get("/hello")
    def hello(ctx):
        ctx.send_string("Hello " + ctx.query("name", "Guest"))

    app.run()

Serving needs the optional server extra (``pip install wren[server]``).
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "ConfigurationError",
    "ConflictError",
    "Ctx",
    "DecodeError",
    "FileResponse",
    "Group",
    "HTTPError",
    "Middleware",
    "MissingFile",
    "Next",
    "NotFound",
    "PayloadTooLarge",
    "Request",
    "Response",
    "ResponseAlreadySent",
    "Router",
    "UnsupportedMediaType",
    "UploadFile",
    "WrenError",
    "get_ctx",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API."""
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Ctx":
        from wren.ctx import Ctx

        return Ctx

    if name == "get_ctx":
        from wren.context import get_ctx

        return get_ctx

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name in ("AnyResponse", "FileResponse", "Response"):
        from wren.http import response as _resp

        return getattr(_resp, name)

    if name == "UploadFile":
        from wren.http.forms import UploadFile

        return UploadFile

    if name == "Router":
        from wren.routing.router import Router

        return Router

    if name == "Group":
        from wren.routing.group import Group

        return Group

    if name in ("Middleware", "Next"):
        from wren.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "ConflictError",
        "DecodeError",
        "HTTPError",
        "MissingFile",
        "NotFound",
        "PayloadTooLarge",
        "ResponseAlreadySent",
        "UnsupportedMediaType",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
