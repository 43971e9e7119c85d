"""Serve an asset app with pounce.

``create_asset_app`` returns a live ASGI callable, so the pounce
``Server`` is used directly instead of an import string.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spa_assets.app import AssetApp


def run_server(app: AssetApp, host: str, port: int, *, workers: int = 1) -> None:
    """Start a pounce server for *app* and block until it stops."""
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(host=host, port=port, workers=workers)
    server = Server(config, app)
    server.run()
