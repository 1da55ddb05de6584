"""Serve an app over HTTP with pounce.

Pounce's ``run()`` takes an import string, but wren has a live ``App``
object, so ``pounce.Server`` is driven directly with the ASGI callable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.app import App


def run_server(
    app: App,
    host: str,
    port: int,
    *,
    app_path: str | None = None,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """Start a single-worker pounce server for *app*.

    Args:
        app: ASGI callable (wren App instance).
        host: Bind host address.
        port: Bind port number.
        app_path: Optional ``"module:attribute"`` import string. Pounce
            reimports the app from it on each reload cycle.
        reload: Restart on file changes. Ignored without *app_path*, since
            a live object cannot be reloaded from disk.
        log_level: Server log level name.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload and app_path is not None,
        log_level=log_level,
    )
    Server(config, app, app_path=app_path).run()
